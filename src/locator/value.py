"""Resource locator value.

This module provides the `Locator` class, the structured form of a resource
locator (scheme, host, port, path and fragment). Each locator holds the
protocol handler resolved for its scheme and delegates rendering and
connection opening to it.
"""

import logging
from typing import BinaryIO

from .connection import LocatorConnection
from .exceptions import MalformedLocatorError
from .handlers import LocatorHandler
from .resolver import HandlerResolver, get_default_resolver

logger = logging.getLogger(__name__)

UNSPECIFIED_PORT = -1
FRAGMENT_SEPARATOR = "#"


class Locator:
    """Structured resource locator bound to its protocol handler.

    Locators are immutable once constructed. Equality is a literal comparison
    of every component and never resolves host names.

    Attributes:
        _scheme: Scheme name, never empty.
        _host: Host name, or None.
        _port: Port number, or ``UNSPECIFIED_PORT``.
        _path: Path, possibly empty.
        _fragment: Fragment without the leading ``#``, or None.
        _handler: Shared handler resolved for the scheme.
        _resolver: Resolver used to find handlers for this locator, or None
            until the process-wide one is first needed.
    """

    __slots__ = (
        "_scheme",
        "_host",
        "_port",
        "_path",
        "_fragment",
        "_handler",
        "_resolver",
    )

    def __init__(
        self,
        scheme: str,
        host: str | None,
        port: int,
        path: str,
        handler: LocatorHandler | None = None,
        *,
        resolver: HandlerResolver | None = None,
    ):
        """Create a locator from its components.

        A fragment embedded in `path` after the first ``#`` is split off into
        the fragment component.

        Args:
            scheme: Scheme name.
            host: Host name, or None.
            port: Port number, or ``UNSPECIFIED_PORT``.
            path: Path, optionally followed by ``#fragment``.
            handler: Handler to use instead of resolving one for `scheme`.
            resolver: Resolver to use instead of the process-wide one.

        Raises:
            MalformedLocatorError: If `scheme` is empty or has no handler.
        """
        if not scheme:
            raise MalformedLocatorError("Locator scheme is missing.", scheme=scheme)

        self._resolver = resolver
        self._handler = self._select_handler(scheme, handler)
        self._scheme = scheme
        self._host = host
        self._port = port
        self._path, separator, fragment = path.partition(FRAGMENT_SEPARATOR)
        self._fragment = fragment if separator else None

    @classmethod
    def for_host(
        cls,
        scheme: str,
        host: str | None,
        path: str,
        handler: LocatorHandler | None = None,
        *,
        resolver: HandlerResolver | None = None,
    ) -> "Locator":
        """Create a locator with an unspecified port."""
        return cls(scheme, host, UNSPECIFIED_PORT, path, handler, resolver=resolver)

    @classmethod
    def _partial(
        cls,
        scheme: str,
        host: str | None,
        port: int,
        path: str | None,
        handler: LocatorHandler,
        resolver: HandlerResolver | None,
    ) -> "Locator":
        """Create a locator under construction for a handler to complete."""
        locator = cls.__new__(cls)
        locator._resolver = resolver
        locator._handler = handler
        locator._scheme = scheme
        locator._host = host
        locator._port = port
        locator._path = path  # type: ignore[assignment]
        locator._fragment = None
        return locator

    def _select_handler(
        self, scheme: str, handler: LocatorHandler | None
    ) -> LocatorHandler:
        if handler is not None:
            # the process-wide registry has no permission check
            if self._resolver is not None:
                self._resolver.registry.check_permission("specifyStreamHandler")
            return handler

        resolved = self.resolver.resolve(scheme)
        if resolved is None:
            raise MalformedLocatorError(
                f"No handler for protocol '{scheme}'.", scheme=scheme
            )
        return resolved

    def _set_components(
        self,
        scheme: str,
        host: str | None,
        port: int,
        path: str | None,
        fragment: str | None,
    ) -> None:
        """Reinitialize every component while the locator is being parsed."""
        if scheme != self._scheme:
            if not scheme:
                raise MalformedLocatorError("Locator scheme is missing.", scheme=scheme)
            logger.debug(
                "Handler changed locator scheme.",
                extra={"old_scheme": self._scheme, "new_scheme": scheme},
            )
            self._handler = self._select_handler(scheme, None)
        self._scheme = scheme
        self._host = host
        self._port = port
        self._path = path  # type: ignore[assignment]
        self._fragment = fragment

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def host(self) -> str | None:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def path(self) -> str:
        return self._path

    @property
    def fragment(self) -> str | None:
        return self._fragment

    @property
    def handler(self) -> LocatorHandler:
        return self._handler

    @property
    def resolver(self) -> HandlerResolver:
        """The resolver bound to this locator, defaulting to the process-wide one."""
        if self._resolver is None:
            self._resolver = get_default_resolver()
        return self._resolver

    def resolve(self, spec: str) -> "Locator":
        """Parse `spec` relative to this locator.

        Raises:
            MalformedLocatorError: If `spec` cannot be parsed.
        """
        from .parsing import parse_locator

        return parse_locator(spec, self, resolver=self.resolver)

    def same_file(self, other: "Locator | None") -> bool:
        """Return True if `other` addresses the same resource, ignoring fragments."""
        if other is None:
            return False
        return (
            self._scheme == other._scheme
            and self._host == other._host
            and self._port == other._port
            and self._path == other._path
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locator):
            return NotImplemented
        return self.same_file(other) and self._fragment == other._fragment

    def __hash__(self) -> int:
        return hash(self._scheme) ^ hash(self._host) ^ hash(self._path)

    def to_external_form(self) -> str:
        """Render this locator through its handler."""
        return self._handler.render(self)

    def __str__(self) -> str:
        return self.to_external_form()

    def __repr__(self) -> str:
        return f"Locator({self.to_external_form()!r})"

    def open_connection(self) -> LocatorConnection:
        """Create a connection through this locator's handler.

        Raises:
            OSError: Propagated from the handler.
        """
        return self._handler.open_connection(self)

    def open_stream(self) -> BinaryIO:
        """Open a connection and return a binary stream over the resource."""
        return self.open_connection().open_stream()

    def get_content(self) -> bytes:
        """Open a connection and return the full resource content."""
        return self.open_connection().get_content()
