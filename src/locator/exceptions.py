"""Custom exceptions for the locator package.

This module defines the exception classes raised while building locators,
resolving protocol handlers and loading configuration. Exceptions carry
structured attributes so log output can report the offending input.
"""


class LocatorError(Exception):
    """Base class for locator errors."""


class MalformedLocatorError(LocatorError):
    """Raised when a locator cannot be constructed.

    Covers a missing scheme, a scheme with no resolvable handler, and a
    relative specification given without a base locator.

    Attributes:
        spec: The specification string being parsed, if any.
        scheme: The scheme involved in the failure, if known.
    """

    def __init__(
        self,
        message: str,
        spec: str | None = None,
        scheme: str | None = None,
    ):
        super().__init__(message)
        self.spec = spec
        self.scheme = scheme


class FactoryAlreadyInstalledError(LocatorError):
    """Raised when a handler factory is installed on a registry that already has one."""


class ConfigLoadError(LocatorError):
    """Raised when a configuration file fails to load.

    Attributes:
        config_file: Path to the configuration file that failed to load.
    """

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
    ):
        super().__init__(message)
        self.config_file = config_file
