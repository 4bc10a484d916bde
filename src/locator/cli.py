"""Command-line interface for parsing and fetching locators.

Parses a locator specification, optionally relative to a base, and prints
its components as JSON. With ``--fetch`` the resource content is written to
standard output instead.
"""

import json
import logging
import sys

import httpx
from pydantic import Field
from pydantic_settings import CliImplicitFlag, CliPositionalArg

from .config import LocatorSettings
from .exceptions import LocatorError
from .logging_config import setup_logging
from .parsing import parse_locator
from .resolver import HandlerResolver
from .value import Locator

logger = logging.getLogger(__name__)


class CliSettings(LocatorSettings):
    """Settings plus the command-line arguments.

    Attributes:
        spec: The locator specification to parse.
        base: Optional base locator the specification is relative to.
        fetch: Write the resource content to stdout instead of the components.
    """

    spec: CliPositionalArg[str] = Field(description="Locator specification to parse.")
    base: str | None = Field(
        default=None,
        description="Base locator for relative specifications.",
    )
    fetch: CliImplicitFlag[bool] = Field(
        default=False,
        description="Fetch the resource and write its content to stdout.",
    )


def describe(locator: Locator) -> dict[str, str | int | None]:
    """Return the components of `locator` as a JSON-serializable dict."""
    return {
        "scheme": locator.scheme,
        "host": locator.host,
        "port": locator.port,
        "path": locator.path,
        "fragment": locator.fragment,
        "external_form": locator.to_external_form(),
    }


def main_cli(argv: list[str] | None = None) -> int:
    """Parse the command line, then print or fetch the locator.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Returns:
        Process exit status.
    """
    cli_args: list[str] | bool = argv if argv is not None else True
    settings = CliSettings(_cli_parse_args=cli_args)  # type: ignore[call-arg]

    setup_logging(
        log_format_type=settings.log_format,
        app_log_level_name=settings.log_level,
        include_stacktrace=settings.log_include_stacktrace,
    )
    logger.debug(
        "Settings loaded.",
        extra={
            "handler_prefixes": settings.handler_prefixes,
            "config_file": str(settings.config_file),
        },
    )

    resolver = HandlerResolver.from_settings(settings)
    try:
        base = (
            parse_locator(settings.base, resolver=resolver)
            if settings.base is not None
            else None
        )
        locator = parse_locator(settings.spec, base, resolver=resolver)
    except LocatorError:
        logger.error("Failed to parse locator.", exc_info=True)
        return 1

    if not settings.fetch:
        print(json.dumps(describe(locator), indent=2))
        return 0

    try:
        content = locator.get_content()
    except (OSError, httpx.HTTPError):
        logger.error(
            "Failed to fetch locator.",
            extra={"locator": str(locator)},
            exc_info=True,
        )
        return 1
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()
    return 0
