"""
Services for the game center tools.

This module provides:
- changes: listing the files a merged pull request touched (git or GitHub API)
"""

from gamecenter.services.changes import (
    ChangedFilesError,
    GitHubChangesClient,
    get_changed_files,
    git_changed_files,
)

__all__ = [
    "ChangedFilesError",
    "GitHubChangesClient",
    "get_changed_files",
    "git_changed_files",
]
