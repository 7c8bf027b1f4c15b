"""Internal HTTP handling utilities for sendout.

This module provides the low-level HTTP communication layer used by the
provider clients. It handles:
- Dispatching a prepared request through a caller-supplied HTTP client
  (sync and async)
- Mapping transport failures and error responses onto sendout exceptions

Connection pooling, proxies and TLS settings belong to the injected
``httpx.Client``/``httpx.AsyncClient``; no retries are attempted.

This is an internal module and should not be imported directly by users.
"""

import logging
from typing import Any, Literal, Protocol

import httpx

from sendout.exceptions import (
    APIError,
    ConfigError,
    ConnectionError,
    InvalidRecipientError,
    RateLimitExceededError,
    SendFailedError,
    TimeoutError,
)

logger = logging.getLogger(__name__)


# HTTP methods supported by the client
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Provider error codes that point at the recipient (inactive/suppressed address)
INVALID_RECIPIENT_ERROR_CODES = frozenset({406})

# Provider error codes caused by configuration: bad or missing API token,
# sender signature not found, sender signature not confirmed
CONFIG_ERROR_CODES = frozenset({10, 400, 401})


class Execute(Protocol):
    """Anything that can send a prepared HTTP request, e.g. ``httpx.Client``."""

    def send(self, request: httpx.Request) -> httpx.Response: ...


class AsyncExecute(Protocol):
    """Async counterpart of `Execute`, e.g. ``httpx.AsyncClient``."""

    async def send(self, request: httpx.Request) -> httpx.Response: ...


def _parse_error_response(response: httpx.Response) -> tuple[str, int | None, Any]:
    """Parse an error response to extract message, provider code, and body.

    The provider wraps errors as ``{"ErrorCode": 300, "Message": "..."}``.
    Falls back to the raw response text if the body is not JSON.

    Args:
        response: The HTTP response to parse.

    Returns:
        A tuple of (message, error_code, response_body).
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return text, None, text
        return f"HTTP {response.status_code} error", None, None

    if isinstance(body, dict):
        error_code = body.get("ErrorCode")
        if not isinstance(error_code, int):
            error_code = None
        message = body.get("Message") or body.get("message") or body.get("error")
        if message:
            return str(message), error_code, body
        return f"HTTP {response.status_code} error", error_code, body

    return str(body), None, body


def _raise_for_status(response: httpx.Response) -> None:
    """Raise an appropriate exception for error status codes.

    Args:
        response: The HTTP response to check.

    Raises:
        RateLimitExceededError: For HTTP 429 responses.
        InvalidRecipientError: When the provider rejects the recipient.
        ConfigError: When the provider rejects the token or sender.
        APIError: For any other non-success response.
    """
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        logger.warning("Provider rate limit exceeded (HTTP 429)")
        raise RateLimitExceededError()

    if response.is_success:
        return

    message, error_code, response_body = _parse_error_response(response)
    logger.error(
        f"Provider returned HTTP {response.status_code} "
        f"(error code {error_code}): {message}"
    )

    if error_code in INVALID_RECIPIENT_ERROR_CODES:
        raise InvalidRecipientError(message, error_code=error_code)
    if error_code in CONFIG_ERROR_CODES:
        raise ConfigError(message)
    raise APIError(
        message=message,
        status_code=response.status_code,
        error_code=error_code,
        response_body=response_body,
    )


def _request_timeout(request: httpx.Request) -> float | None:
    """Read timeout attached to the request, used in timeout errors."""
    timeout = request.extensions.get("timeout") or {}
    return timeout.get("read")


class HTTPClient:
    """Synchronous request executor.

    Wraps a caller-supplied ``httpx.Client`` (or any `Execute`) and maps
    transport failures and error responses onto sendout exceptions.

    Attributes:
        client: The injected HTTP client.
    """

    def __init__(self, client: Execute, owns_client: bool = False) -> None:
        """Initialize the executor.

        Args:
            client: The HTTP client that actually sends requests.
            owns_client: Whether `close` should close the injected client.
        """
        self.client = client
        self._owns_client = owns_client

    @classmethod
    def default(cls, **client_kwargs: Any) -> "HTTPClient":
        """Create an executor around a fresh ``httpx.Client`` it owns.

        Args:
            **client_kwargs: Passed through to ``httpx.Client``.
        """
        return cls(httpx.Client(**client_kwargs), owns_client=True)

    def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client and isinstance(self.client, httpx.Client):
            self.client.close()

    def __enter__(self) -> "HTTPClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close the client."""
        self.close()

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send a prepared request and return the successful response.

        Args:
            request: The fully built HTTP request.

        Returns:
            The provider's 2xx response, body already read.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            SendFailedError: For any other transport failure.
            RateLimitExceededError: If the provider answers HTTP 429.
            APIError: If the provider returns another error response.
        """
        url = str(request.url)
        logger.debug(f"{request.method} {url}")

        try:
            response = self.client.send(request)
        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to {url}: {e}")
            raise ConnectionError(url=url) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request to {url} timed out")
            raise TimeoutError(timeout=_request_timeout(request), url=url) from e
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise SendFailedError(str(e)) from e

        _raise_for_status(response)
        return response


class AsyncHTTPClient:
    """Asynchronous request executor.

    Wraps a caller-supplied ``httpx.AsyncClient`` (or any `AsyncExecute`)
    with the same error mapping as `HTTPClient`.

    Attributes:
        client: The injected async HTTP client.
    """

    def __init__(self, client: AsyncExecute, owns_client: bool = False) -> None:
        """Initialize the async executor.

        Args:
            client: The async HTTP client that actually sends requests.
            owns_client: Whether `close` should close the injected client.
        """
        self.client = client
        self._owns_client = owns_client

    @classmethod
    def default(cls, **client_kwargs: Any) -> "AsyncHTTPClient":
        """Create an executor around a fresh ``httpx.AsyncClient`` it owns.

        Args:
            **client_kwargs: Passed through to ``httpx.AsyncClient``.
        """
        return cls(httpx.AsyncClient(**client_kwargs), owns_client=True)

    async def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client and isinstance(self.client, httpx.AsyncClient):
            await self.client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager and close the client."""
        await self.close()

    async def execute(self, request: httpx.Request) -> httpx.Response:
        """Send a prepared request and return the successful response.

        Args:
            request: The fully built HTTP request.

        Returns:
            The provider's 2xx response, body already read.

        Raises:
            Same exceptions as `HTTPClient.execute`.
        """
        url = str(request.url)
        logger.debug(f"{request.method} {url}")

        try:
            response = await self.client.send(request)
        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to {url}: {e}")
            raise ConnectionError(url=url) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request to {url} timed out")
            raise TimeoutError(timeout=_request_timeout(request), url=url) from e
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise SendFailedError(str(e)) from e

        _raise_for_status(response)
        return response
