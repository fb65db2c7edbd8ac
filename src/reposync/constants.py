"""
Global constants for the reposync CLI.
"""

# Git constants
DEFAULT_REMOTE_NAME = "origin"
DEFAULT_BRANCH = "main"
DEFAULT_GIT_USERNAME = "username"  # accepted by token based providers
DEFAULT_ADD_GLOB_PATTERN = "."
INITIAL_COMMIT_MESSAGE = "initial commit"
GIT_URL_SUFFIX = ".git"

# Retry constants
PUSH_RETRIES = 3
FAILURE_BACKOFF_TIME = 3  # seconds between attempts

# HTTP constants
PROVIDER_REQUEST_TIMEOUT = 15
DEFAULT_HEADERS = {
    "Accept": "application/vnd.github+json",
}

# Environment variables
ENV_GIT_REPO = "GIT_REPO"
ENV_GIT_TOKEN = "GIT_TOKEN"
ENV_GIT_USER = "GIT_USER"

# Logging constants
LOG_APP_NAME = "reposync"
LOG_FILE_NAME = "reposync"
LOG_RETENTION_DAYS = 7
LOG_LINES_TO_SHOW = 20

# Keyring service for stored git tokens
KEYRING_SERVICE_NAME = "reposync_git_credentials"

# Sensitive data keys for sanitization
SENSITIVE_KEYS = (
    "password", "token", "access_token", "authorization", "secret",
    "private_key", "api_key", "bearer", "cookie",
)
