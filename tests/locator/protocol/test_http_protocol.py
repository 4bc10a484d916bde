"""Tests for the http and https protocol handlers."""

import httpx
import pytest

from locator import HandlerRegistry, HandlerResolver, Locator, MappingHandlerSource
from locator.protocol import http, https


def _transport(requests: list[httpx.Request]) -> httpx.MockTransport:
    def handle(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/missing":
            return httpx.Response(404)
        if request.url.path == "/moved":
            return httpx.Response(302, headers={"Location": "/index.html"})
        return httpx.Response(200, content=b"<html>hello</html>")

    return httpx.MockTransport(handle)


@pytest.fixture
def requests() -> list[httpx.Request]:
    """Collects the requests seen by the mock transport."""
    return []


@pytest.fixture
def http_resolver(requests: list[httpx.Request]) -> HandlerResolver:
    """Provide a resolver whose http handlers use the mock transport."""
    transport = _transport(requests)
    return HandlerResolver(
        HandlerRegistry(),
        [
            MappingHandlerSource(
                {
                    "http": lambda: http.Handler(timeout=5.0, transport=transport),
                    "https": lambda: https.Handler(transport=transport),
                }
            )
        ],
    )


@pytest.mark.unit
def test_http_get_content(http_resolver: HandlerResolver, requests: list[httpx.Request]):
    """Tests fetching content over http without sending the fragment."""
    locator = Locator("http", "example.com", 8080, "/index.html#top", resolver=http_resolver)

    content = locator.get_content()

    assert content == b"<html>hello</html>"
    assert [str(r.url) for r in requests] == ["http://example.com:8080/index.html"]


@pytest.mark.unit
def test_http_connection_fetches_once(
    http_resolver: HandlerResolver, requests: list[httpx.Request]
):
    """Tests that one connection sends a single request."""
    locator = Locator.for_host("https", "example.com", "/index.html", resolver=http_resolver)
    connection = locator.open_connection()

    assert requests == []
    assert connection.get_content() == b"<html>hello</html>"
    assert connection.open_stream().read() == b"<html>hello</html>"
    assert len(requests) == 1
    assert requests[0].url.scheme == "https"


@pytest.mark.unit
def test_http_follows_redirects(
    http_resolver: HandlerResolver, requests: list[httpx.Request]
):
    """Tests that redirects are followed."""
    locator = Locator.for_host("http", "example.com", "/moved", resolver=http_resolver)

    assert locator.get_content() == b"<html>hello</html>"
    assert [r.url.path for r in requests] == ["/moved", "/index.html"]


@pytest.mark.unit
def test_http_error_status_propagates(http_resolver: HandlerResolver):
    """Tests that HTTP errors reach the caller unchanged."""
    locator = Locator.for_host("http", "example.com", "/missing", resolver=http_resolver)

    with pytest.raises(httpx.HTTPStatusError):
        locator.get_content()


@pytest.mark.unit
def test_http_handler_defaults():
    """Tests the zero-argument handler used by by-convention lookup."""
    handler = http.Handler()

    assert handler.timeout == http.DEFAULT_TIMEOUT
    assert isinstance(https.Handler(), http.Handler)
