"""Exception hierarchy for krlib."""


class KrlibError(Exception):
    """Base class for all errors raised by krlib."""


class EnvironmentCheckError(KrlibError):
    """Raised when not running inside the expected repository or git fails."""


class VersionError(KrlibError):
    """Raised for invalid version strings or an unsupported npm version."""


class ConfigError(VersionError):
    """Raised when the config file or a package manifest cannot be loaded."""


class InstallError(KrlibError):
    """An npm install that exited with a non-zero code."""

    def __init__(self, component_name: str, install_path: str, returncode: int):
        self.component_name = component_name
        self.install_path = install_path
        self.returncode = returncode
        super().__init__(
            f"Failed to install kr-library at {install_path} with code: {returncode}"
        )
