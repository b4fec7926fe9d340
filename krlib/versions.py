"""
Semantic version helpers.

An empty version string stands for "not installed" and orders before every
real version.
"""

import re
from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

from .errors import VersionError

PIN_PATTERN = re.compile(r"#semver:(\d+\.\d+\.\d+)")
TAG_PATTERN = re.compile(r"refs/tags/v(\d+\.\d+\.\d+)")


def parse_version(value: str) -> Version | None:
    """Parse a version string, returning None for an empty one."""
    if not value:
        return None
    try:
        return Version(value)
    except InvalidVersion as e:
        raise VersionError(f"Invalid version: {value!r}") from e


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""
    left = parse_version(a)
    right = parse_version(b)
    if left is None or right is None:
        # Missing versions sort first
        return (left is not None) - (right is not None)
    return (left > right) - (left < right)


def is_older(a: str, b: str) -> bool:
    return compare_versions(a, b) < 0


def max_version(versions: Iterable[str]) -> str:
    """Return the highest version by semantic order."""
    candidates = [v for v in versions if v]
    if not candidates:
        raise VersionError("No versions to choose from")
    return max(candidates, key=Version)


def extract_pinned_version(spec: str) -> str | None:
    """Extract ``X.Y.Z`` from a dependency spec like ``git+url#semver:X.Y.Z``."""
    match = PIN_PATTERN.search(spec)
    if match:
        return match.group(1)
    return None


def replace_pinned_version(spec: str, version: str) -> str:
    """Point the ``#semver:`` pin of a dependency spec at ``version``."""
    return PIN_PATTERN.sub(f"#semver:{version}", spec, count=1)


def parse_remote_tags(output: str) -> list[str]:
    """Collect release versions from ``git ls-remote --tags`` output."""
    return TAG_PATTERN.findall(output)
