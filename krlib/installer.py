"""
npm invocation.

Runs ``npm install`` in component directories. Installs of a batch run
concurrently, each started half a second after the previous one so npm does
not contend for its cache lock.
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from . import console
from .errors import InstallError, VersionError
from .registry import Component

NPM_EXECUTABLE = "npm.cmd" if sys.platform.startswith("win") else "npm"

INSTALL_STAGGER_SECONDS = 0.5

# npm's self-update nag, printed on stderr by every command
SUPPRESSED_STDERR = "npm update check failed"

# Return code recorded when npm could not be started or its output could not be read
SPAWN_FAILURE_CODE = 127

STREAM_CHUNK_SIZE = 64 * 1024


@dataclass
class InstallResult:
    """Outcome of one npm install."""

    component: Component
    returncode: int
    version: str | None = None

    @property
    def success(self) -> bool:
        return self.returncode == 0


async def _stream_lines(stream: asyncio.StreamReader, log: Callable[[str], None]) -> None:
    # Read in chunks; readline() fails on lines longer than the stream limit
    pending = b""
    while True:
        chunk = await stream.read(STREAM_CHUNK_SIZE)
        if not chunk:
            break
        *lines, pending = (pending + chunk).split(b"\n")
        for line in lines:
            _emit(line, log)
    _emit(pending, log)


def _emit(line: bytes, log: Callable[[str], None]) -> None:
    message = line.decode("utf-8", errors="replace").rstrip()
    if message:
        log(message)


def _log_stderr(message: str) -> None:
    if SUPPRESSED_STDERR not in message:
        console.error(message)


async def get_npm_version(executable: str = NPM_EXECUTABLE) -> str:
    """Return the output of ``npm --version``."""
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            "--version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as e:
        console.error(str(e))
        raise VersionError(
            "Could not get npm version, please make sure npm has been installed"
        ) from e
    if process.returncode != 0:
        console.error(stderr.decode("utf-8", errors="replace").strip())
        raise VersionError(
            "Could not get npm version, please make sure npm has been installed"
        )
    return stdout.decode("utf-8", errors="replace").split("\n")[0].strip()


class PackageInstaller:
    """Installs kr-library into component directories with npm."""

    def __init__(
        self,
        npm_url: str,
        executable: str = NPM_EXECUTABLE,
        stagger: float = INSTALL_STAGGER_SECONDS,
    ):
        self.npm_url = npm_url
        self.executable = executable
        self.stagger = stagger

    async def run_npm(self, args: list[str], cwd: Path) -> int:
        """Run npm in ``cwd``, streaming its output, and return the exit code."""
        process = await asyncio.create_subprocess_exec(
            self.executable,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd),
        )
        try:
            await asyncio.gather(
                _stream_lines(process.stdout, console.info),
                _stream_lines(process.stderr, _log_stderr),
            )
        finally:
            returncode = await process.wait()
        return returncode

    async def _install(self, component: Component, args: list[str], version: str | None) -> InstallResult:
        try:
            returncode = await self.run_npm(args, component.path)
        except (OSError, ValueError) as e:
            console.error(f"Could not run {self.executable} at {component.path}: {e}")
            returncode = SPAWN_FAILURE_CODE

        if returncode == 0:
            console.success(f"Install kr-library into {component.path} successfully")
        else:
            console.error(str(InstallError(component.name, str(component.path), returncode)))
        return InstallResult(component=component, returncode=returncode, version=version)

    async def install(self, component: Component) -> InstallResult:
        """Run a plain ``npm install`` for a component."""
        console.info(f"Please wait, Running 'npm install' at {component.path} . . .")
        return await self._install(component, ["install"], None)

    async def install_version(self, component: Component, version: str) -> InstallResult:
        """Install a specific kr-library version into a component."""
        console.info(
            f"Please wait, installing kr-library({version}) into {component.path} . . ."
        )
        return await self._install(component, ["install", self.npm_url + version], version)

    async def _schedule(
        self,
        components: list[Component],
        action: Callable[[Component], Awaitable[InstallResult]],
    ) -> list[InstallResult]:
        async def delayed(index: int, component: Component) -> InstallResult:
            await asyncio.sleep(index * self.stagger)
            return await action(component)

        return list(
            await asyncio.gather(*(delayed(i, c) for i, c in enumerate(components)))
        )

    async def install_all(self, components: list[Component]) -> list[InstallResult]:
        """Run ``npm install`` in every component."""
        return await self._schedule(components, self.install)

    async def install_at_version(
        self,
        components: list[Component],
        version: str | None = None,
    ) -> list[InstallResult]:
        """
        Install kr-library into every component.

        Args:
            components: Components to install into
            version: Version to install; each component's expected version if None

        Returns:
            One InstallResult per component, in input order
        """

        def target(component: Component) -> str:
            return version if version is not None else component.expected_version

        return await self._schedule(
            components, lambda c: self.install_version(c, target(c))
        )
