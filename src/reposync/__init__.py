"""
reposync - git repository provisioning and synchronization.
"""

__version__ = "0.1.0"
