"""Base classes for API requests and provider clients.

`ApiRequest` lets each request type declare its own HTTP method and endpoint
path, so the client knows how to send it. `BaseClient` and `AsyncBaseClient`
turn such a request into an ``httpx.Request`` (JSON body, provider
authentication headers, timeout) and dispatch it through the shared
executor.

This is an internal module and should not be imported directly by users.
"""

from typing import Any, ClassVar

import httpx
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from sendout._http import AsyncExecute, AsyncHTTPClient, Execute, HTTPClient, HttpMethod
from sendout.config import ServiceConfig
from sendout.exceptions import SendFailedError


class ApiRequest(BaseModel):
    """A request body that knows where and how it is sent.

    Attributes:
        METHOD: Which HTTP method to use when sending this request.
        ENDPOINT: The path portion of the URL; must start with ``/``
            (e.g. ``"/email"``).
    """

    METHOD: ClassVar[HttpMethod]
    ENDPOINT: ClassVar[str]

    def to_json(self) -> bytes:
        """Serialize the request into its wire JSON, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode()


class _RequestBuilder:
    """Shared request construction for sync and async clients."""

    def __init__(self, config: ServiceConfig) -> None:
        self.config = config

    def _auth_headers(self) -> dict[str, str]:
        """Provider authentication headers. Overridden by provider clients."""
        return {}

    def new_http_request(self, request: ApiRequest) -> httpx.Request:
        """Build the HTTP request for an API request.

        Args:
            request: The API request to send.

        Returns:
            A ready-to-send ``httpx.Request``.

        Raises:
            SendFailedError: If the request cannot be serialized.
        """
        try:
            body = request.to_json()
        except PydanticSerializationError as err:
            raise SendFailedError(f"failed to serialize email: {err}") from err

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            **self._auth_headers(),
        }
        return httpx.Request(
            request.METHOD,
            f"{self.config.base_url}{request.ENDPOINT}",
            headers=headers,
            content=body,
            extensions={"timeout": httpx.Timeout(self.config.timeout).as_dict()},
        )


class BaseClient(_RequestBuilder):
    """Base class for synchronous provider clients.

    Attributes:
        config: The service configuration.
        _http: The executor used to dispatch requests.
    """

    def __init__(
        self,
        http_client: "Execute | HTTPClient",
        config: ServiceConfig,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: An ``httpx.Client`` (or any object with a compatible
                ``send`` method), or an already wrapped `HTTPClient`.
            config: The service configuration.
        """
        super().__init__(config)
        if isinstance(http_client, HTTPClient):
            self._http = http_client
        else:
            self._http = HTTPClient(http_client)

    def close(self) -> None:
        """Release the HTTP client if the client created it."""
        self._http.close()

    def __enter__(self) -> "BaseClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close the client."""
        self.close()

    def _execute(self, request: ApiRequest) -> httpx.Response:
        return self._http.execute(self.new_http_request(request))


class AsyncBaseClient(_RequestBuilder):
    """Base class for asynchronous provider clients.

    Attributes:
        config: The service configuration.
        _http: The async executor used to dispatch requests.
    """

    def __init__(
        self,
        http_client: "AsyncExecute | AsyncHTTPClient",
        config: ServiceConfig,
    ) -> None:
        """Initialize the async client.

        Args:
            http_client: An ``httpx.AsyncClient`` (or any object with a
                compatible ``send`` coroutine), or an `AsyncHTTPClient`.
            config: The service configuration.
        """
        super().__init__(config)
        if isinstance(http_client, AsyncHTTPClient):
            self._http = http_client
        else:
            self._http = AsyncHTTPClient(http_client)

    async def close(self) -> None:
        """Release the HTTP client if the client created it."""
        await self._http.close()

    async def __aenter__(self) -> "AsyncBaseClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager and close the client."""
        await self.close()

    async def _execute(self, request: ApiRequest) -> httpx.Response:
        return await self._http.execute(self.new_http_request(request))
