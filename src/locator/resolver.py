"""Protocol handler resolution.

This module provides the `HandlerResolver` class, which produces a handler
for a scheme by consulting the registry cache, then the registry's factory
override, then an ordered list of handler sources. The first source that
yields a usable handler wins; failures inside a source only move the search
on to the next one.
"""

from collections.abc import Callable, Mapping, Sequence
import importlib
from importlib.metadata import entry_points
import logging
import threading
from typing import Protocol

from .config import LocatorSettings
from .handlers import HandlerFactory, LocatorHandler
from .registry import HandlerRegistry

logger = logging.getLogger(__name__)

BUILTIN_HANDLER_PACKAGE = "locator.protocol"
HANDLER_ENTRY_POINT_GROUP = "locator.handlers"


class HandlerSource(Protocol):
    """A place the by-convention search looks for scheme handlers."""

    def find(self, scheme: str) -> LocatorHandler | None:
        """Return a new handler for `scheme`, or None if this source has none."""
        ...


def _instantiate(factory: Callable[[], object]) -> LocatorHandler | None:
    handler = factory()
    if not isinstance(handler, LocatorHandler):
        return None
    return handler


class PackageHandlerSource:
    """Find handlers by module naming convention.

    The handler for scheme ``s`` under prefix ``p`` is the ``Handler`` class
    of module ``p.s``, instantiated with no arguments.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"PackageHandlerSource({self.prefix!r})"

    def find(self, scheme: str) -> LocatorHandler | None:
        if not scheme.isidentifier():
            return None
        module_name = f"{self.prefix}.{scheme}"
        try:
            module = importlib.import_module(module_name)
            handler = _instantiate(module.Handler)
        except Exception:
            logger.debug(
                "Handler module unavailable.",
                extra={"scheme": scheme, "module_name": module_name},
                exc_info=True,
            )
            return None
        if handler is None:
            logger.debug(
                "Handler in module lacks the handler interface.",
                extra={"scheme": scheme, "module_name": module_name},
            )
        return handler


class EntryPointHandlerSource:
    """Find handlers registered by installed distributions as entry points.

    Each entry point in the group is named after the scheme it serves and
    loads a zero-argument handler class.
    """

    def __init__(self, group: str = HANDLER_ENTRY_POINT_GROUP):
        self.group = group

    def __repr__(self) -> str:
        return f"EntryPointHandlerSource({self.group!r})"

    def find(self, scheme: str) -> LocatorHandler | None:
        try:
            candidates = entry_points(group=self.group, name=scheme)
        except Exception:
            logger.debug(
                "Handler entry points could not be listed.",
                extra={"scheme": scheme, "group": self.group},
                exc_info=True,
            )
            return None
        for entry_point in candidates:
            try:
                handler = _instantiate(entry_point.load())
            except Exception:
                logger.debug(
                    "Handler entry point failed to load.",
                    extra={"scheme": scheme, "entry_point": entry_point.value},
                    exc_info=True,
                )
                continue
            if handler is not None:
                return handler
        return None


class MappingHandlerSource:
    """Find handlers in an explicit scheme to handler-class table."""

    def __init__(self, handler_types: Mapping[str, Callable[[], object]]):
        self.handler_types = dict(handler_types)

    def __repr__(self) -> str:
        return f"MappingHandlerSource({sorted(self.handler_types)!r})"

    def find(self, scheme: str) -> LocatorHandler | None:
        handler_type = self.handler_types.get(scheme)
        if handler_type is None:
            return None
        try:
            return _instantiate(handler_type)
        except Exception:
            logger.debug(
                "Registered handler failed to instantiate.",
                extra={"scheme": scheme},
                exc_info=True,
            )
            return None


def default_sources(prefixes: Sequence[str] = ()) -> list[HandlerSource]:
    """Build the standard search order.

    Args:
        prefixes: Extra package prefixes searched before the built-in ones.

    Returns:
        Sources for each prefix, then the built-in handler package, then the
        handler entry-point group.
    """
    sources: list[HandlerSource] = [PackageHandlerSource(p) for p in prefixes]
    sources.append(PackageHandlerSource(BUILTIN_HANDLER_PACKAGE))
    sources.append(EntryPointHandlerSource())
    return sources


class HandlerResolver:
    """Resolve scheme names to protocol handlers.

    Attributes:
        registry: Cache of resolved handlers and holder of the factory override.
        sources: Ordered handler sources for the by-convention search.
    """

    def __init__(
        self,
        registry: HandlerRegistry | None = None,
        sources: Sequence[HandlerSource] | None = None,
    ):
        self.registry = registry if registry is not None else HandlerRegistry()
        self.sources: list[HandlerSource] = (
            list(sources) if sources is not None else default_sources()
        )

    @classmethod
    def from_settings(
        cls, settings: LocatorSettings, registry: HandlerRegistry | None = None
    ) -> "HandlerResolver":
        """Create a resolver searching the configured handler packages first."""
        return cls(registry, default_sources(settings.handler_prefixes))

    def resolve(self, scheme: str) -> LocatorHandler | None:
        """Return the handler for `scheme`, or None if none can be found.

        A miss is not cached, so a later call can succeed once a handler
        becomes available.

        Args:
            scheme: The scheme name. No case folding is applied.

        Returns:
            The cached or newly resolved handler, or None.
        """
        handler = self.registry.lookup(scheme)
        if handler is not None:
            return handler

        factory = self.registry.factory
        if factory is not None:
            produced = factory(scheme)
            if isinstance(produced, LocatorHandler):
                return self.registry.insert(scheme, produced)
            if produced is not None:
                logger.warning(
                    "Handler factory returned an object without the handler interface.",
                    extra={"scheme": scheme, "returned_type": type(produced).__name__},
                )

        for source in self.sources:
            handler = source.find(scheme)
            if handler is not None:
                logger.debug(
                    "Resolved protocol handler.",
                    extra={"scheme": scheme, "source": repr(source)},
                )
                return self.registry.insert(scheme, handler)

        logger.debug("No protocol handler found.", extra={"scheme": scheme})
        return None


_default_resolver: HandlerResolver | None = None
_default_resolver_lock = threading.Lock()


def get_default_resolver() -> HandlerResolver:
    """Return the process-wide resolver, building it from settings on first use."""
    global _default_resolver
    with _default_resolver_lock:
        if _default_resolver is None:
            _default_resolver = HandlerResolver.from_settings(LocatorSettings())
        return _default_resolver


def set_handler_factory(factory: HandlerFactory) -> None:
    """Install the handler factory override on the process-wide registry.

    Raises:
        FactoryAlreadyInstalledError: If a factory is already installed.
    """
    get_default_resolver().registry.set_factory(factory)
