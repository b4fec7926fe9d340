"""
Component discovery and version state.

Builds one Component per entry of the configuration and answers which of
them need installing or upgrading.
"""

from dataclasses import dataclass
from pathlib import Path

from .config import (
    COMPONENT_PKG_FILE,
    KR_LIB_PKG_FILE,
    LIBRARY_NAME,
    ComponentManifest,
    InstalledManifest,
    LibraryConfig,
    load_manifest,
    read_json,
    write_json,
)
from .errors import ConfigError
from .versions import extract_pinned_version, is_older, replace_pinned_version


@dataclass
class Component:
    """A monorepo component depending on kr-library."""

    name: str
    path: Path
    installed_version: str = ""
    expected_version: str = ""
    exists: bool = False

    @property
    def manifest_path(self) -> Path:
        return self.path / COMPONENT_PKG_FILE

    @property
    def installed_manifest_path(self) -> Path:
        return self.path / KR_LIB_PKG_FILE

    @classmethod
    def load(cls, name: str, path: Path) -> "Component":
        """Read the installed and expected versions of a component from disk."""
        component = cls(name=name, path=path)
        component.refresh()
        return component

    def refresh(self) -> None:
        """Re-read both manifests."""
        self.exists = self.installed_manifest_path.exists()
        self.installed_version = self._read_installed_version()
        self.expected_version = self._read_expected_version()

    def _read_installed_version(self) -> str:
        if not self.exists:
            return ""
        manifest = load_manifest(self.installed_manifest_path, InstalledManifest)
        return manifest.version

    def _read_expected_version(self) -> str:
        manifest = load_manifest(self.manifest_path, ComponentManifest)
        spec = manifest.library_spec
        if not spec:
            return ""
        version = extract_pinned_version(spec)
        if version is None:
            raise ConfigError(
                f"Could not find a '#semver:' pin for {LIBRARY_NAME} in {self.manifest_path}"
            )
        return version


class ComponentRegistry:
    """All configured components plus the latest released library version."""

    def __init__(
        self,
        components: list[Component],
        config: LibraryConfig,
        latest_version: str = "",
    ):
        names = [c.name for c in components]
        if len(names) != len(set(names)):
            raise ConfigError("Component names must be unique")
        self.components = components
        self.config = config
        self.latest_version = latest_version

    @classmethod
    def discover(
        cls,
        root: Path,
        config: LibraryConfig,
        latest_version: str = "",
    ) -> "ComponentRegistry":
        """Load every component listed in the configuration, in config order."""
        root = Path(root)
        components = [
            Component.load(name, (root / rel_path).resolve())
            for name, rel_path in config.component.items()
        ]
        return cls(components, config, latest_version)

    def find(self, name: str) -> Component | None:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def get_uninstalled(self) -> list[Component]:
        """Components where kr-library has never been installed."""
        return [c for c in self.components if not c.exists]

    def get_outdated_vs_expected(self) -> list[Component]:
        """Components whose installed version is behind their pinned version."""
        return [c for c in self.components if is_older(c.installed_version, c.expected_version)]

    def get_outdated_vs_latest(self) -> list[Component]:
        """Components whose pinned version is behind the latest release."""
        return [c for c in self.components if is_older(c.expected_version, self.latest_version)]

    def is_outdated(self, component: Component) -> bool:
        """True if the library is missing or older than the component pins."""
        return not component.exists or is_older(
            component.installed_version, component.expected_version
        )

    def set_version(self, component: Component, version: str) -> None:
        """
        Pin the component's kr-library dependency to ``version``.

        Only the dependency value changes; the other keys keep their order.
        """
        path = component.manifest_path
        data = read_json(path)
        raw = path.read_text(encoding="utf-8")

        dependencies = data.get("dependencies")
        if dependencies is None:
            dependencies = data["dependencies"] = {}
        if not isinstance(dependencies, dict):
            raise ConfigError(f"'dependencies' in {path} is not an object")

        spec = dependencies.get(LIBRARY_NAME)
        if spec and extract_pinned_version(spec) is not None:
            dependencies[LIBRARY_NAME] = replace_pinned_version(spec, version)
        else:
            dependencies[LIBRARY_NAME] = self.config.npm_url + version

        write_json(path, data, trailing_newline=raw.endswith("\n"))
        component.expected_version = version
