"""Unit tests for the sendout HTTP execution layer.

This module tests the executor defined in sendout/_http.py.
The tests verify:

1. Helper Functions:
   - _parse_error_response: Extracting provider errors from responses
   - _raise_for_status: Mapping status and provider codes to exceptions

2. HTTPClient (Synchronous):
   - Passing successful responses through
   - Mapping transport failures onto sendout exceptions
   - Closing only clients it owns

3. AsyncHTTPClient (Asynchronous):
   - Same behaviour as HTTPClient, but async

Note: These tests use httpx's mock transport to avoid real network calls.
"""

import httpx
import pytest

from sendout._http import (
    AsyncHTTPClient,
    HTTPClient,
    _parse_error_response,
    _raise_for_status,
)
from sendout.exceptions import (
    APIError,
    ConfigError,
    ConnectionError,
    InvalidRecipientError,
    RateLimitExceededError,
    SendFailedError,
    TimeoutError,
)

URL = "http://postmark.test/email"


def _request(timeout: float | None = None) -> httpx.Request:
    extensions = {}
    if timeout is not None:
        extensions["timeout"] = httpx.Timeout(timeout).as_dict()
    return httpx.Request("POST", URL, json={"To": "a@example.com"}, extensions=extensions)


def _raising(error: Exception):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    return handler


# =============================================================================
# Helper Function Tests: _parse_error_response
# =============================================================================


class TestParseErrorResponse:
    """Tests for the _parse_error_response helper function."""

    def test_parse_provider_error(self) -> None:
        """Parse Postmark's {"ErrorCode", "Message"} envelope."""
        response = httpx.Response(
            422,
            json={"ErrorCode": 300, "Message": "Invalid 'From' address"},
        )
        message, error_code, body = _parse_error_response(response)

        assert message == "Invalid 'From' address"
        assert error_code == 300
        assert body == {"ErrorCode": 300, "Message": "Invalid 'From' address"}

    def test_parse_lowercase_message(self) -> None:
        response = httpx.Response(500, json={"message": "Internal error occurred"})
        message, error_code, _ = _parse_error_response(response)

        assert message == "Internal error occurred"
        assert error_code is None

    def test_parse_non_integer_code_ignored(self) -> None:
        response = httpx.Response(422, json={"ErrorCode": "x", "Message": "odd"})
        _, error_code, _ = _parse_error_response(response)

        assert error_code is None

    def test_parse_object_without_message(self) -> None:
        response = httpx.Response(400, json={"foo": "bar"})
        message, _, body = _parse_error_response(response)

        assert message == "HTTP 400 error"
        assert body == {"foo": "bar"}

    def test_parse_plain_text_response(self) -> None:
        response = httpx.Response(502, text="Bad Gateway")
        message, error_code, body = _parse_error_response(response)

        assert message == "Bad Gateway"
        assert error_code is None
        assert body == "Bad Gateway"

    def test_parse_empty_response(self) -> None:
        response = httpx.Response(503, text="")
        message, error_code, body = _parse_error_response(response)

        assert "503" in message
        assert error_code is None
        assert body is None


# =============================================================================
# Helper Function Tests: _raise_for_status
# =============================================================================


class TestRaiseForStatus:
    """Tests for the _raise_for_status helper function."""

    def test_success_does_not_raise(self) -> None:
        for status_code in [200, 201, 204]:
            _raise_for_status(httpx.Response(status_code))

    def test_429_raises_rate_limit(self) -> None:
        with pytest.raises(RateLimitExceededError):
            _raise_for_status(httpx.Response(429))

    def test_inactive_recipient_raises_invalid_recipient(self) -> None:
        response = httpx.Response(
            422,
            json={
                "ErrorCode": 406,
                "Message": "You tried to send to a recipient that has been marked as inactive.",
            },
        )

        with pytest.raises(InvalidRecipientError) as exc_info:
            _raise_for_status(response)

        assert exc_info.value.error_code == 406
        assert "inactive" in exc_info.value.message

    @pytest.mark.parametrize("error_code", [10, 400, 401])
    def test_token_and_signature_errors_raise_config_error(self, error_code: int) -> None:
        response = httpx.Response(
            401 if error_code == 10 else 422,
            json={"ErrorCode": error_code, "Message": "rejected"},
        )

        with pytest.raises(ConfigError):
            _raise_for_status(response)

    def test_other_provider_error_raises_api_error(self) -> None:
        response = httpx.Response(
            422,
            json={"ErrorCode": 300, "Message": "Invalid email request"},
        )

        with pytest.raises(APIError) as exc_info:
            _raise_for_status(response)

        assert exc_info.value.status_code == 422
        assert exc_info.value.error_code == 300
        assert exc_info.value.response_body["Message"] == "Invalid email request"

    def test_500_raises_api_error(self) -> None:
        with pytest.raises(APIError) as exc_info:
            _raise_for_status(httpx.Response(500, text="Internal Server Error"))

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value, SendFailedError)


# =============================================================================
# HTTPClient Tests
# =============================================================================


class TestHTTPClient:
    """Tests for the synchronous executor."""

    def test_returns_successful_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            return httpx.Response(200, json={"ok": True})

        client = HTTPClient(httpx.Client(transport=httpx.MockTransport(handler)))

        response = client.execute(_request())

        assert response.json() == {"ok": True}

    def test_rate_limit(self) -> None:
        client = HTTPClient(
            httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(429)))
        )

        with pytest.raises(RateLimitExceededError):
            client.execute(_request())

    def test_connection_error(self) -> None:
        client = HTTPClient(
            httpx.Client(
                transport=httpx.MockTransport(_raising(httpx.ConnectError("refused")))
            )
        )

        with pytest.raises(ConnectionError) as exc_info:
            client.execute(_request())

        assert exc_info.value.message == "connection failed"
        assert exc_info.value.url == URL
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_error(self) -> None:
        client = HTTPClient(
            httpx.Client(
                transport=httpx.MockTransport(_raising(httpx.ReadTimeout("slow")))
            )
        )

        with pytest.raises(TimeoutError) as exc_info:
            client.execute(_request(timeout=5.0))

        assert exc_info.value.message == "connection timeout"
        assert exc_info.value.timeout == 5.0

    def test_other_transport_error(self) -> None:
        client = HTTPClient(
            httpx.Client(
                transport=httpx.MockTransport(
                    _raising(httpx.RemoteProtocolError("server hung up"))
                )
            )
        )

        with pytest.raises(SendFailedError) as exc_info:
            client.execute(_request())

        assert "server hung up" in exc_info.value.message

    def test_close_leaves_injected_client_open(self) -> None:
        """The caller owns an injected client."""
        http = httpx.Client()
        HTTPClient(http).close()

        assert http.is_closed is False
        http.close()

    def test_default_owns_client(self) -> None:
        with HTTPClient.default(timeout=5.0) as client:
            http = client.client
        assert http.is_closed is True


# =============================================================================
# AsyncHTTPClient Tests
# =============================================================================


class TestAsyncHTTPClient:
    """Tests for the asynchronous executor."""

    async def test_returns_successful_response(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"async": True})

        client = AsyncHTTPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        response = await client.execute(_request())

        assert response.json() == {"async": True}

    async def test_rate_limit(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429)

        client = AsyncHTTPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(RateLimitExceededError):
            await client.execute(_request())

    async def test_connection_error(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        client = AsyncHTTPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(ConnectionError):
            await client.execute(_request())

    async def test_timeout_error(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow")

        client = AsyncHTTPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(TimeoutError):
            await client.execute(_request())

    async def test_provider_error(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"ErrorCode": 300, "Message": "Invalid"})

        client = AsyncHTTPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(APIError):
            await client.execute(_request())

    async def test_default_owns_client(self) -> None:
        async with AsyncHTTPClient.default() as client:
            http = client.client
        assert http.is_closed is True
