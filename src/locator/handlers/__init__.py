from .base_handler import HandlerFactory, LocatorHandler, StreamHandlerBase

__all__ = [
    "HandlerFactory",
    "LocatorHandler",
    "StreamHandlerBase",
]
