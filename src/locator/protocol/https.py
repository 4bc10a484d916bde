"""Handler for ``https:`` locators."""

from .http import Handler as HttpHandler


class Handler(HttpHandler):
    """Handler for ``https:`` locators; TLS is handled by the HTTP client."""
