"""Connection protocol returned by protocol handlers."""

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class LocatorConnection(Protocol):
    """Protocol for a connection to the resource a locator addresses.

    Connections are created unconnected by a handler's ``open_connection``.
    Errors raised while connecting or reading (``OSError``, HTTP client
    errors) propagate unchanged to the caller.
    """

    def connect(self) -> None:
        """Establish the connection if it is not already established."""
        ...

    def open_stream(self) -> BinaryIO:
        """Connect if needed and return a binary stream over the resource."""
        ...

    def get_content(self) -> bytes:
        """Connect if needed and return the full resource content."""
        ...
