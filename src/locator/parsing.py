"""Parsing of locator specification strings.

A specification is either absolute (``scheme:rest``) or relative to a base
locator. The scheme is taken from the text before the first ``:`` only when
that colon precedes every ``/``. Components not given by the specification
are inherited from the base, except the fragment, which is never inherited.
The scheme-specific part is parsed by the resolved handler.
"""

import logging

from .exceptions import MalformedLocatorError
from .handlers import LocatorHandler
from .resolver import HandlerResolver, get_default_resolver
from .value import FRAGMENT_SEPARATOR, UNSPECIFIED_PORT, Locator

logger = logging.getLogger(__name__)


def _explicit_scheme_end(spec: str) -> int:
    """Return the index of the colon ending an explicit scheme, or -1."""
    colon = spec.find(":")
    if colon <= 0:
        return -1
    slash = spec.find("/")
    if slash >= 0 and slash < colon:
        return -1
    return colon


def parse_locator(
    spec: str,
    base: Locator | None = None,
    handler: LocatorHandler | None = None,
    *,
    resolver: HandlerResolver | None = None,
) -> Locator:
    """Parse `spec`, optionally relative to `base`, into a locator.

    Args:
        spec: The specification string.
        base: Locator supplying components the specification omits.
        handler: Handler to use instead of resolving one for the scheme.
        resolver: Resolver to use. Defaults to the base's resolver, then the
            process-wide one.

    Returns:
        The parsed locator.

    Raises:
        MalformedLocatorError: If `spec` is relative and `base` is None, or
            no handler exists for the scheme.
    """
    colon = _explicit_scheme_end(spec)
    if colon > 0:
        scheme = spec[:colon]
        if base is not None and base.scheme == scheme:
            host, port, path = base.host, base.port, base.path
        else:
            host, port, path = None, UNSPECIFIED_PORT, None
    elif base is not None:
        scheme, host, port, path = base.scheme, base.host, base.port, base.path
    else:
        raise MalformedLocatorError(
            "Absolute specification required without a base locator.", spec=spec
        )

    if resolver is None and base is not None:
        resolver = base._resolver  # pyright: ignore[reportPrivateUsage]
    if handler is not None:
        # the process-wide registry has no permission check
        if resolver is not None:
            resolver.registry.check_permission("specifyStreamHandler")
    else:
        if resolver is None:
            resolver = get_default_resolver()
        handler = resolver.resolve(scheme)
        if handler is None:
            raise MalformedLocatorError(
                f"No handler for protocol '{scheme}'.", spec=spec, scheme=scheme
            )

    locator = Locator._partial(  # pyright: ignore[reportPrivateUsage]
        scheme, host, port, path, handler, resolver
    )

    start = colon + 1
    hash_at = spec.find(FRAGMENT_SEPARATOR, start)
    limit = hash_at if hash_at >= 0 else len(spec)
    handler.parse_segment(locator, spec, start, limit)

    fragment = spec[hash_at + 1 :] if hash_at >= 0 else locator.fragment
    locator._set_components(  # pyright: ignore[reportPrivateUsage]
        locator.scheme,
        locator.host,
        locator.port,
        locator.path or "",
        fragment,
    )
    logger.debug(
        "Parsed locator.",
        extra={"spec": spec, "scheme": locator.scheme, "relative": colon < 0},
    )
    return locator
