"""Handler for ``http:`` locators."""

import io
import logging
from typing import BinaryIO

import httpx

from ..handlers import StreamHandlerBase
from ..value import FRAGMENT_SEPARATOR, Locator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpConnection:
    """Connection fetching a resource with an HTTP GET request.

    The response is fetched once, on first use, and kept for later reads.

    Attributes:
        url: The request URL, without fragment.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._response: httpx.Response | None = None

    @property
    def response(self) -> httpx.Response:
        """The HTTP response, fetched on first access.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status.
        """
        if self._response is None:
            logger.debug("Sending HTTP request.", extra={"url": self.url})
            with httpx.Client(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = client.get(self.url)
                response.raise_for_status()
            self._response = response
        return self._response

    def connect(self) -> None:
        """Send the request if it has not been sent yet."""
        _ = self.response

    def open_stream(self) -> BinaryIO:
        return io.BytesIO(self.response.content)

    def get_content(self) -> bytes:
        return self.response.content


class Handler(StreamHandlerBase):
    """Handler for ``http:`` locators.

    Attributes:
        timeout: Request timeout in seconds for connections it opens.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.timeout = timeout
        self._transport = transport

    def open_connection(self, locator: Locator) -> HttpConnection:
        url = self.render(locator).partition(FRAGMENT_SEPARATOR)[0]
        return HttpConnection(url, self.timeout, self._transport)
