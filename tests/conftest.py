"""Pytest configuration and fixtures for krlib tests."""

import json
import stat
import tempfile
from pathlib import Path

import pytest
from git import Repo

from krlib.config import CONFIG_FILE

LIBRARY_URL = "git@github.com:gcleyser/kr-library.git"


def write_component(
    root: Path,
    rel_path: str,
    expected: str | None = "1.0.0",
    installed: str | None = None,
    trailing_newline: bool = True,
) -> Path:
    """Create a component with a package.json and optionally an installed library."""
    path = root / rel_path
    path.mkdir(parents=True, exist_ok=True)

    manifest = {"name": path.name, "version": "0.1.0", "dependencies": {"lodash": "^4.17.21"}}
    if expected is not None:
        manifest["dependencies"]["kr-library"] = f"git+{LIBRARY_URL}#semver:{expected}"
    manifest["scripts"] = {"build": "webpack"}
    text = json.dumps(manifest, indent=2)
    (path / "package.json").write_text(text + ("\n" if trailing_newline else ""))

    if installed is not None:
        lib_dir = path / "node_modules" / "kr-library"
        lib_dir.mkdir(parents=True, exist_ok=True)
        (lib_dir / "package.json").write_text(
            json.dumps({"name": "kr-library", "version": installed}, indent=2)
        )
    return path


def write_config(root: Path, components: dict[str, str], url: str = LIBRARY_URL) -> Path:
    path = root / CONFIG_FILE
    path.write_text(json.dumps({"url": url, "component": components}, indent=2))
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def monorepo(temp_dir: Path):
    """Create a git repository pushing to the expected owner."""
    repo_path = temp_dir / "leyserkids"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.create_remote("origin", "git@github.com:gcleyser/leyserkids.git")

    readme = repo_path / "README.md"
    readme.write_text("# Monorepo")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    yield repo_path


@pytest.fixture
def library_remote(temp_dir: Path):
    """Create a repository standing in for the kr-library remote."""
    repo_path = temp_dir / "kr-library"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    (repo_path / "package.json").write_text('{"name": "kr-library"}')
    repo.index.add(["package.json"])
    repo.index.commit("Initial commit")
    for tag in ["v1.0.0", "v1.2.0", "v1.1.5", "not-a-release"]:
        repo.create_tag(tag)

    yield repo_path


@pytest.fixture
def fake_npm(temp_dir: Path):
    """
    Build an executable standing in for npm.

    Every call appends its arguments to ``npm-calls.log`` in the working
    directory. ``--version`` prints the given version.
    """

    def make(
        version: str = "6.14.4",
        exit_code: int = 0,
        stderr: str = "",
        line_length: int = 0,
    ) -> str:
        script = temp_dir / f"npm-{version}-{exit_code}-{line_length}"
        lines = [
            "#!/bin/sh",
            'if [ "$1" = "--version" ]; then',
            f"  echo {version}",
            "  exit 0",
            "fi",
            'echo "$@" >> npm-calls.log',
            'echo "added 1 package"',
        ]
        if line_length:
            lines.append(f"head -c {line_length} /dev/zero | tr '\\0' x; echo")
        if stderr:
            lines.append(f'echo "{stderr}" >&2')
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return make
