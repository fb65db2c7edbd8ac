from reposync.utils.fs import FS


def test_chroot_sub_path(tmp_path):
    fs = FS(tmp_path)

    assert fs.chroot("apps/prod").root == tmp_path / "apps" / "prod"
    assert fs.chroot("/apps").root == tmp_path / "apps"


def test_chroot_empty_path_is_root(tmp_path):
    fs = FS(tmp_path)

    assert fs.chroot("") == fs
    assert fs.chroot("/") == fs
    assert fs.chroot(".") == fs


def test_write_and_read_file(tmp_path):
    fs = FS(tmp_path).chroot("apps")

    written = fs.write_file("nested/app.yaml", "kind: App\n")

    assert written == tmp_path / "apps" / "nested" / "app.yaml"
    assert fs.exists("nested/app.yaml")
    assert fs.read_file("nested/app.yaml") == "kind: App\n"


def test_mkdir_all(tmp_path):
    fs = FS(tmp_path / "work")

    assert fs.mkdir_all() == tmp_path / "work"
    assert fs.mkdir_all("a/b").is_dir()
