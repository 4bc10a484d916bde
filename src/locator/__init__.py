from .config import LocatorSettings
from .connection import LocatorConnection
from .exceptions import (
    ConfigLoadError,
    FactoryAlreadyInstalledError,
    LocatorError,
    MalformedLocatorError,
)
from .handlers import HandlerFactory, LocatorHandler, StreamHandlerBase
from .parsing import parse_locator
from .registry import HandlerRegistry
from .resolver import (
    EntryPointHandlerSource,
    HandlerResolver,
    HandlerSource,
    MappingHandlerSource,
    PackageHandlerSource,
    get_default_resolver,
    set_handler_factory,
)
from .value import UNSPECIFIED_PORT, Locator

__all__ = [
    "UNSPECIFIED_PORT",
    "ConfigLoadError",
    "EntryPointHandlerSource",
    "FactoryAlreadyInstalledError",
    "HandlerFactory",
    "HandlerRegistry",
    "HandlerResolver",
    "HandlerSource",
    "Locator",
    "LocatorConnection",
    "LocatorError",
    "LocatorHandler",
    "LocatorSettings",
    "MalformedLocatorError",
    "MappingHandlerSource",
    "PackageHandlerSource",
    "StreamHandlerBase",
    "get_default_resolver",
    "parse_locator",
    "set_handler_factory",
]
