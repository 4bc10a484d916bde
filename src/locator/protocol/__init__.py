"""Built-in protocol handlers.

Each submodule is named after the scheme it serves and exposes a ``Handler``
class, which the resolver finds by that naming convention.
"""
