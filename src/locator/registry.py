"""Thread-safe cache of resolved protocol handlers.

This module provides the `HandlerRegistry` class, which maps scheme names to
the handler instances resolved for them and holds the optional one-shot
handler factory override.
"""

from collections.abc import Callable
import logging
import threading

from .exceptions import FactoryAlreadyInstalledError
from .handlers import HandlerFactory, LocatorHandler

logger = logging.getLogger(__name__)

PermissionCheck = Callable[[str], None]


class HandlerRegistry:
    """Cache scheme handlers and hold the handler factory override.

    Entries are added lazily and never removed. A single lock serializes
    lookups, inserts and factory installation.

    Attributes:
        _handlers: Mapping of scheme name to resolved handler.
        _factory: The installed handler factory, if any.
        _permission_check: Callable invoked with a permission name before a
            privileged operation; it denies by raising.
        _lock: Lock guarding the mutable state above.
    """

    def __init__(self, permission_check: PermissionCheck | None = None):
        self._handlers: dict[str, LocatorHandler] = {}
        self._factory: HandlerFactory | None = None
        self._permission_check = permission_check
        self._lock = threading.Lock()

    def lookup(self, scheme: str) -> LocatorHandler | None:
        """Return the cached handler for `scheme`, or None if none is cached."""
        with self._lock:
            return self._handlers.get(scheme)

    def insert(self, scheme: str, handler: LocatorHandler) -> LocatorHandler:
        """Cache `handler` for `scheme` unless a handler is already cached.

        Args:
            scheme: The scheme name, matched literally.
            handler: The handler to cache.

        Returns:
            The handler cached for `scheme` after the call. When another
            thread inserted first, its handler is returned instead.
        """
        with self._lock:
            cached = self._handlers.setdefault(scheme, handler)
        if cached is handler:
            logger.debug(
                "Cached protocol handler.",
                extra={"scheme": scheme, "handler": type(handler).__name__},
            )
        return cached

    def schemes(self) -> list[str]:
        """Return a snapshot of the cached scheme names."""
        with self._lock:
            return sorted(self._handlers)

    @property
    def factory(self) -> HandlerFactory | None:
        with self._lock:
            return self._factory

    def check_permission(self, name: str) -> None:
        """Run the permission check for `name`, if one was configured.

        Raises:
            Exception: Whatever the permission check raises to deny access.
        """
        if self._permission_check is not None:
            self._permission_check(name)

    def set_factory(self, factory: HandlerFactory) -> None:
        """Install the handler factory override.

        The override can be installed once per registry; it cannot be
        replaced or removed afterwards.

        Args:
            factory: Callable returning a handler for a scheme, or None.

        Raises:
            FactoryAlreadyInstalledError: If a factory is already installed.
        """
        self.check_permission("setFactory")
        with self._lock:
            if self._factory is not None:
                raise FactoryAlreadyInstalledError("Handler factory already installed.")
            self._factory = factory
        logger.debug("Installed handler factory.", extra={"factory": repr(factory)})
