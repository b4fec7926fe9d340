"""
Git operations for krlib.

Wraps the handful of git queries krlib needs using GitPython: the root of the
monorepo, the configured user, the push URL of origin, and the release tags of
the kr-library remote.
"""

import re
from pathlib import Path

from git import Repo
from git.cmd import Git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from . import console
from .errors import EnvironmentCheckError, VersionError
from .versions import max_version, parse_remote_tags


class GitRepository:
    """Wrapper around the monorepo krlib is run from."""

    def __init__(self, path: Path | str = "."):
        """Initialize repository wrapper, searching parent directories for the repo."""
        self.path = Path(path).resolve()
        try:
            self.repo = Repo(self.path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            console.error(str(e))
            raise EnvironmentCheckError(f"Not a valid git repository: {self.path}") from e

    def get_root_directory(self) -> Path:
        """Get the top-level directory of the repository."""
        try:
            raw_path = self.repo.git.rev_parse("--show-toplevel").split("\n")[0]
        except GitCommandError as e:
            console.error(str(e))
            raise EnvironmentCheckError("Could not get root directory from git") from e
        return Path(raw_path).resolve()

    def get_user_email(self) -> str:
        """Get the configured user email, or an empty string if unset."""
        try:
            return self.repo.git.config("user.email").split("\n")[0]
        except GitCommandError:
            return ""

    def get_push_url(self, remote: str = "origin") -> str:
        """Get the push URL of a remote."""
        try:
            return self.repo.git.remote("get-url", "--push", remote).split("\n")[0]
        except GitCommandError as e:
            console.error(str(e))
            raise EnvironmentCheckError("Could not get repository name from git") from e

    def is_owned_by(self, pattern: str, remote: str = "origin") -> bool:
        """Check whether the push URL of ``remote`` matches ``pattern``."""
        return re.search(pattern, self.get_push_url(remote)) is not None


def list_remote_versions(url: str) -> list[str]:
    """List the ``vX.Y.Z`` release versions tagged in a remote repository."""
    try:
        output = Git().ls_remote("--tags", "--refs", url)
    except GitCommandError as e:
        console.error(str(e))
        raise EnvironmentCheckError(
            "Could not obtain latest version number from remote git"
        ) from e
    return parse_remote_tags(output)


def get_latest_version(url: str) -> str:
    """Get the highest release version tagged in a remote repository."""
    versions = list_remote_versions(url)
    if not versions:
        raise VersionError(f"No release tags found in {url}")
    return max_version(versions)
