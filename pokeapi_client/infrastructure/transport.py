"""HTTP implementation of the Transport port."""

import logging

import httpx

from ..application.domain import Transport
from ..application.exceptions import ConfigurationError, FetchError

from .decorators import retry_on_network_error

_DEFAULT_HEADERS = {"Accept": "application/json"}


class HttpxTransport(Transport):
    """A transport that issues GET requests through a shared httpx client."""

    def __init__(self, client: httpx.AsyncClient, timeout: float):
        """
        Initializes the transport adapter.

        Args:
            client: An instance of httpx.AsyncClient.
            timeout: Per-request timeout, in seconds.

        Raises:
            ConfigurationError: If the timeout is not a positive number.
        """

        if timeout is None or timeout <= 0:
            raise ConfigurationError(
                f"Request timeout must be positive, got {timeout!r}"
            )

        self.client = client
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    @retry_on_network_error
    async def _execute_get(self, url: str) -> bytes:
        """Executes the raw HTTP GET request."""
        response = await self.client.get(
            url, headers=_DEFAULT_HEADERS, timeout=self.timeout
        )
        response.raise_for_status()
        return response.content

    async def get(self, url: str) -> bytes:
        """
        Fetches the payload at a URL, retrying transient failures.

        This method fulfills the Transport port contract: every httpx error,
        including a malformed URL, is translated into a FetchError carrying
        the URL and status or cause.

        Args:
            url: The absolute resource URL.

        Returns:
            The raw response body.

        Raises:
            FetchError: If the request fails after all retries.
        """

        try:
            payload = await self._execute_get(url)
        except httpx.HTTPStatusError as e:
            raise FetchError(url, status_code=e.response.status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(url, cause=f"{type(e).__name__}: {e}") from e

        self.logger.debug(f"Received {len(payload)} bytes from {url}")
        return payload

    async def aclose(self):
        await self.client.aclose()
