"""
Version control system (VCS) integration.

Contains the Git client used to list staged changes, read file contents
from ``HEAD`` and the index, and commit.
"""

from .git_client import GitClient, GitError  # noqa: F401
