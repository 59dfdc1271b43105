"""
Changed-file discovery for merged pull requests.

By default the list comes from git: the workflow checks out the merge commit
and we diff it against its parent. When the checkout is shallow or squashed
in an unusual way, the GitHub API can be used instead.
"""

import logging
import subprocess
from pathlib import Path

from github import Auth, Github, GithubException

from gamecenter.config import settings

logger = logging.getLogger(__name__)


class ChangedFilesError(Exception):
    """Raised when the files changed by a pull request cannot be listed."""


def git_changed_files(
    repo_root: Path | str | None = None,
    base: str = "HEAD~1",
    head: str = "HEAD",
) -> list[str]:
    """List paths changed between two commits using `git diff --name-only`."""
    cwd = Path(repo_root) if repo_root is not None else settings.repo_root
    try:
        result = subprocess.run(
            ["git", "diff", "--name-only", base, head],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise ChangedFilesError(f"git is not available: {e}") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise ChangedFilesError(f"git diff {base} {head} failed: {stderr or e}") from e

    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class GitHubChangesClient:
    """Lists the files of a pull request through the GitHub API."""

    def __init__(self, token: str | None = None):
        self._token = token or settings.github_token
        if self._token:
            self._github = Github(auth=Auth.Token(self._token))
        else:
            self._github = Github()

    def list_pr_files(self, repository: str, number: int) -> list[str]:
        """Get the filenames touched by a pull request ("owner/name", number)."""
        try:
            repo = self._github.get_repo(repository)
            pr = repo.get_pull(number)
            return [f.filename for f in pr.get_files()]
        except GithubException as e:
            raise ChangedFilesError(
                f"Could not list files for {repository}#{number}: {e}"
            ) from e


def get_changed_files(
    pr_number: int,
    source: str | None = None,
    repo_root: Path | str | None = None,
    repository: str | None = None,
) -> list[str]:
    """
    List the files changed by a merged pull request.

    Args:
        pr_number: Number of the merged pull request
        source: "git" or "github" (defaults to settings.changes_source)
        repo_root: Repository checkout used for the git source
        repository: "owner/name" used for the github source

    Raises ChangedFilesError if the list cannot be obtained.
    """
    source = source or settings.changes_source

    if source == "git":
        files = git_changed_files(repo_root)
    elif source == "github":
        repository = repository or settings.github_repository
        if not repository:
            raise ChangedFilesError("GITHUB_REPOSITORY is required for the github changes source")
        files = GitHubChangesClient().list_pr_files(repository, pr_number)
    else:
        raise ChangedFilesError(f"Unknown changes source: {source}")

    logger.debug("Changed files (%s): %s", source, files)
    return files
