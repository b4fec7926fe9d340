"""
Interactive reconciliation of kr-library versions.

The orchestrator walks a fixed sequence of stages: environment checks,
discovery, the status table, then up to three reconciliation prompts. It
returns a RunResult instead of exiting; the CLI performs the exit.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from . import console
from .config import MINIMUM_NPM_VERSION, REPOSITORY_OWNER_PATTERN, LibraryConfig
from .errors import EnvironmentCheckError, VersionError
from .git_ops import GitRepository, get_latest_version
from .installer import (
    INSTALL_STAGGER_SECONDS,
    NPM_EXECUTABLE,
    InstallResult,
    PackageInstaller,
    get_npm_version,
)
from .prompt import confirm
from .registry import Component, ComponentRegistry
from .table import render_status_table
from .versions import is_older


class Stage(str, Enum):
    ENVIRONMENT_CHECK = "environment-check"
    DISCOVER = "discover"
    DISPLAY = "display"
    RECONCILE_UNINSTALLED = "reconcile-uninstalled"
    RECONCILE_EXPECTED = "reconcile-expected"
    RECONCILE_LATEST = "reconcile-latest"


class Outcome(str, Enum):
    UP_TO_DATE = "up-to-date"
    INSTALLED = "installed"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass
class RunResult:
    """Where the run stopped and with which exit code."""

    outcome: Outcome
    stage: Stage
    exit_code: int
    install_results: list[InstallResult] | None = None


class Orchestrator:
    """Runs the krlib stages in order."""

    def __init__(
        self,
        git: GitRepository | None = None,
        read_line: Callable[[], str] | None = None,
        npm_executable: str = NPM_EXECUTABLE,
        stagger: float = INSTALL_STAGGER_SECONDS,
        latest_version_getter: Callable[[str], str] = get_latest_version,
    ):
        self.git = git
        self.read_line = read_line
        self.npm_executable = npm_executable
        self.stagger = stagger
        self.latest_version_getter = latest_version_getter
        self.stage = Stage.ENVIRONMENT_CHECK
        self.root: Path | None = None
        self.registry: ComponentRegistry | None = None
        self.installer: PackageInstaller | None = None

    async def run(self) -> RunResult:
        """Run every stage and report how the run ended."""
        try:
            console.show_logo()
            await self.check_environment()
            self.discover()
            self.display()
            return await self.reconcile()
        except Exception as e:
            console.error(f"Failed to run krlib, err: {e}")
            console.error_console.print_exception()
        return RunResult(Outcome.FAILED, self.stage, 1)

    async def check_environment(self) -> None:
        self.stage = Stage.ENVIRONMENT_CHECK
        if self.git is None:
            self.git = GitRepository()
        if not self.git.is_owned_by(REPOSITORY_OWNER_PATTERN):
            raise EnvironmentCheckError("Please run this command in leyserkids directory!")

        npm_version = await get_npm_version(self.npm_executable)
        if is_older(npm_version, MINIMUM_NPM_VERSION):
            raise VersionError(
                f"Oops! The npm version is too low. \n\n"
                f"Please update npm (gte {MINIMUM_NPM_VERSION})"
            )

    def discover(self) -> ComponentRegistry:
        self.stage = Stage.DISCOVER
        self.root = self.git.get_root_directory()
        email = self.git.get_user_email()
        if email:
            console.info(f"Running as {email}")

        config = LibraryConfig.load(self.root)
        console.info("Obtaining the version number . . .")
        latest_version = self.latest_version_getter(config.url)
        console.success(f"The latest kr-library is {latest_version}")

        self.registry = ComponentRegistry.discover(self.root, config, latest_version)
        self.installer = PackageInstaller(
            config.npm_url, executable=self.npm_executable, stagger=self.stagger
        )
        return self.registry

    def display(self) -> None:
        self.stage = Stage.DISPLAY
        console.info("\nOverview\n========")
        console.info(
            render_status_table(self.registry.components, self.registry.latest_version)
        )

    async def reconcile(self) -> RunResult:
        """Offer the first applicable install, stopping after any install."""
        self.stage = Stage.RECONCILE_UNINSTALLED
        uninstalled = self._pinned(self.registry.get_uninstalled())
        if uninstalled:
            console.error(
                "\nOops, The kr-library is not fully installed, "
                "\n\nType [y] to confirm install or [n] to exit"
            )
            if not await confirm(self.read_line):
                return RunResult(Outcome.DECLINED, self.stage, 0)
            results = await self.installer.install_at_version(uninstalled)
            return self._installed(results)

        declined = False
        self.stage = Stage.RECONCILE_EXPECTED
        outdated = self.registry.get_outdated_vs_expected()
        if outdated:
            console.error(
                "\nOops, The kr-library is outdated, "
                "\n\nType [y] to confirm install or [n] to ignore"
            )
            if await confirm(self.read_line):
                results = await self.installer.install_at_version(outdated)
                return self._installed(results)
            declined = True

        self.stage = Stage.RECONCILE_LATEST
        stale = self.registry.get_outdated_vs_latest()
        if stale:
            console.warning(
                "\nThe latest version kr-library is available, "
                "\n\nType [y] to confirm update to latest or [n] to ignore"
            )
            if not await confirm(self.read_line):
                return RunResult(Outcome.DECLINED, self.stage, 0)
            latest = self.registry.latest_version
            # The pin stays on latest even if npm fails afterwards
            for component in stale:
                self.registry.set_version(component, latest)
            results = await self.installer.install_at_version(stale, latest)
            return self._installed(results)

        if declined:
            return RunResult(Outcome.DECLINED, self.stage, 0)
        return RunResult(Outcome.UP_TO_DATE, self.stage, 0)

    def _pinned(self, components: list[Component]) -> list[Component]:
        """Drop components that do not declare kr-library, warning about each."""
        pinned = []
        for component in components:
            if component.expected_version:
                pinned.append(component)
            else:
                console.warning(
                    f"{component.name} does not declare kr-library in {component.manifest_path}, skipping"
                )
        return pinned

    def _installed(self, results: list[InstallResult]) -> RunResult:
        failed = [r for r in results if not r.success]
        if failed:
            console.warning(
                f"{len(failed)} of {len(results)} install(s) failed: "
                + ", ".join(r.component.name for r in failed)
            )
        return RunResult(Outcome.INSTALLED, self.stage, 0, install_results=results)
