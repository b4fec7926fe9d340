"""
Configuration handling for krlib.

Defines the repo-level configuration schema and typed views over the parts
of the npm package manifests that krlib reads and writes.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

LIBRARY_NAME = "kr-library"

# Config file at the root of the monorepo
CONFIG_FILE = "krlib.config.json"

# Relative to each component directory
COMPONENT_PKG_FILE = "package.json"
KR_LIB_PKG_FILE = f"node_modules/{LIBRARY_NAME}/package.json"

# npm below this version rewrites git dependencies on install, see
# https://github.com/npm/npm/issues/17929
MINIMUM_NPM_VERSION = "5.7.1"

# The push URL of origin must contain this owner
REPOSITORY_OWNER_PATTERN = r"gcleyser/"


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f"Duplicate key in configuration: {key!r}")
        result[key] = value
    return result


def read_json(path: Path, unique_keys: bool = False) -> dict[str, Any]:
    """Read a JSON object from ``path``, raising ConfigError on failure."""
    hook = _reject_duplicate_keys if unique_keys else None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f, object_pairs_hook=hook)
    except FileNotFoundError as e:
        raise ConfigError(f"Could not find {path}") from e
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not load {path}, please make the file valid: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Could not load {path}, expected a JSON object")
    return data


def write_json(path: Path, data: dict[str, Any], trailing_newline: bool = True) -> None:
    """Pretty-print ``data`` to ``path`` through a temp file in the same directory."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if trailing_newline:
        text += "\n"
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class LibraryConfig(BaseModel):
    """Contents of ``krlib.config.json``."""

    # Git remote URL of kr-library
    url: str = Field(..., description="Git remote URL of the shared library")
    # Component name -> path relative to the repo root
    component: dict[str, str] = Field(
        default_factory=dict,
        description="Components depending on the library, keyed by name",
    )

    @property
    def npm_url(self) -> str:
        """Dependency spec prefix; append a version to get an installable spec."""
        return f"git+{self.url}#semver:"

    @classmethod
    def from_json(cls, path: Path) -> "LibraryConfig":
        """Load configuration from a JSON file."""
        data = read_json(path, unique_keys=True)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    @classmethod
    def load(cls, root: Path) -> "LibraryConfig":
        """Load the configuration file from the root of the monorepo."""
        return cls.from_json(Path(root) / CONFIG_FILE)


class ComponentManifest(BaseModel):
    """The fields of a component's package.json that krlib consumes."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)

    @property
    def library_spec(self) -> str | None:
        """The kr-library dependency spec, if declared."""
        return self.dependencies.get(LIBRARY_NAME)


class InstalledManifest(BaseModel):
    """The installed kr-library's own package.json."""

    model_config = ConfigDict(extra="ignore")

    version: str = Field(..., min_length=1)


def load_manifest(path: Path, model: type[BaseModel]) -> Any:
    """Read and validate a manifest, raising ConfigError when it is invalid."""
    data = read_json(path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Could not load {path}, please make the file valid: {e}") from e
