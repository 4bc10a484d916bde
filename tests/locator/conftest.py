"""Shared fixtures for locator tests."""

import io
from typing import BinaryIO

import pytest

from locator import (
    HandlerRegistry,
    HandlerResolver,
    Locator,
    MappingHandlerSource,
    PackageHandlerSource,
    StreamHandlerBase,
)


class StubConnection:
    """Connection returning the locator's rendered form as content."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def open_stream(self) -> BinaryIO:
        self.connect()
        return io.BytesIO(self.payload)

    def get_content(self) -> bytes:
        self.connect()
        return self.payload


class StubHandler(StreamHandlerBase):
    """Generic hierarchical handler whose connections echo the locator."""

    def open_connection(self, locator: Locator) -> StubConnection:
        return StubConnection(str(locator).encode())


@pytest.fixture
def stub_handler_type() -> type[StubHandler]:
    """Provide the stub handler class."""
    return StubHandler


@pytest.fixture
def registry() -> HandlerRegistry:
    """Provide an empty, isolated handler registry."""
    return HandlerRegistry()


@pytest.fixture
def resolver(registry: HandlerRegistry) -> HandlerResolver:
    """Provide a resolver knowing the stub schemes and the built-in handlers."""
    return HandlerResolver(
        registry,
        [
            MappingHandlerSource({"scheme": StubHandler, "ftp": StubHandler}),
            PackageHandlerSource("locator.protocol"),
        ],
    )
