"""Handler protocol and the generic hierarchical handler.

This module defines the capability set every protocol handler provides
(segment parsing, connection opening and string rendering) together with
``StreamHandlerBase``, a reusable implementation of the parsing and
rendering rules shared by hierarchical ``scheme://host:port/path`` locators.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..connection import LocatorConnection

if TYPE_CHECKING:
    from ..value import Locator


@runtime_checkable
class LocatorHandler(Protocol):
    """Protocol defining the interface for scheme-specific handlers.

    A single handler instance is shared by every locator of its scheme, so
    implementations must not keep per-locator state.
    """

    def parse_segment(
        self, locator: "Locator", spec: str, start: int, limit: int
    ) -> None:
        """Fill in the components of a locator under construction.

        Args:
            locator: The partially built locator. Its components hold the
                values inherited from the base locator, if any.
            spec: The full specification string.
            start: Index of the first character after the scheme delimiter.
            limit: Index of the fragment separator, or ``len(spec)``.
        """
        ...

    def open_connection(self, locator: "Locator") -> LocatorConnection:
        """Create a connection to the resource addressed by `locator`.

        Args:
            locator: The locator to connect to.

        Returns:
            An unconnected connection object.

        Raises:
            OSError: Implementations may raise for I/O failures.
        """
        ...

    def render(self, locator: "Locator") -> str:
        """Render `locator` in its external string form."""
        ...


HandlerFactory = Callable[[str], LocatorHandler | None]


class StreamHandlerBase(ABC):
    """Base class for handlers of hierarchical locators.

    Subclasses only need to implement ``open_connection``; the parsing and
    rendering rules cover ``scheme://host:port/path#fragment`` forms and
    relative references against an inherited path.
    """

    def parse_segment(
        self, locator: "Locator", spec: str, start: int, limit: int
    ) -> None:
        """Parse the authority and path of ``spec[start:limit]`` into `locator`.

        A leading ``//`` introduces an authority running up to the next ``/``
        (or `limit`) and discards the inherited path. A segment starting with
        ``/`` replaces the path; any other non-empty segment replaces the
        last element of the inherited path.

        Args:
            locator: The locator under construction.
            spec: The full specification string.
            start: Index of the first character after the scheme delimiter.
            limit: Index of the fragment separator, or ``len(spec)``.
        """
        host = locator.host
        port = locator.port
        path: str | None = locator.path

        if spec.startswith("//", start, limit):
            start += 2
            slash = spec.find("/", start, limit)
            host_end = slash if slash >= 0 else limit
            host = spec[start:host_end]

            colon = host.find(":")
            if colon >= 0:
                port_text = host[colon + 1 :]
                # anything but plain ASCII digits keeps the inherited port
                if port_text.isascii() and port_text.isdigit():
                    port = int(port_text)
                host = host[:colon]
            path = None
            start = host_end
        elif host is None:
            host = ""

        segment = spec[start:limit]
        if segment.startswith("/"):
            path = segment
        elif not path:
            path = "/" + segment
        elif segment:
            last_slash = path.rfind("/")
            path = path[:last_slash] + "/" + segment if last_slash >= 0 else segment

        self.set_locator(locator, locator.scheme, host, port, path, locator.fragment)

    @abstractmethod
    def open_connection(self, locator: "Locator") -> LocatorConnection:
        """Create a connection to the resource addressed by `locator`."""

    def render(self, locator: "Locator") -> str:
        """Render `locator` as ``scheme:[//host[:port]]path[#fragment]``."""
        parts = [locator.scheme, ":"]
        if locator.host:
            parts.append("//")
            parts.append(locator.host)
            if locator.port >= 0:
                parts.append(f":{locator.port}")
            if locator.path and not locator.path.startswith("/"):
                parts.append("/")
        parts.append(locator.path)
        if locator.fragment is not None:
            parts.append(f"#{locator.fragment}")
        return "".join(parts)

    def set_locator(
        self,
        locator: "Locator",
        scheme: str,
        host: str | None,
        port: int,
        path: str | None,
        fragment: str | None,
    ) -> None:
        """Reinitialize every component of a locator under construction.

        Only valid from within ``parse_segment``. Changing the scheme makes
        the locator re-resolve its handler.

        Raises:
            MalformedLocatorError: If the new scheme has no handler.
        """
        locator._set_components(scheme, host, port, path, fragment)  # pyright: ignore[reportPrivateUsage]
