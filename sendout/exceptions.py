"""Exception hierarchy for the sendout email client.

This module defines all exceptions that can be raised by the sendout library.
The hierarchy is designed to allow catching specific error types or broader
categories as needed.

Exception Hierarchy:
    SendoutError (base)
    ├── ConfigError - Missing or rejected configuration
    ├── SendFailedError - The email could not be delivered to the provider
    │   ├── ConnectionError - Network/connection failures
    │   ├── TimeoutError - Request timeout
    │   └── APIError - Provider returned an error response
    ├── RateLimitExceededError - Provider answered HTTP 429
    └── InvalidRecipientError - Recipient address invalid or rejected

Example:
    Catching specific errors::

        try:
            client.send_email(message)
        except RateLimitExceededError:
            # Back off and try again later
            ...
        except InvalidRecipientError as e:
            print(f"Bad address: {e.message}")

    Catching all client errors::

        try:
            client.send_email(message)
        except SendoutError as e:
            print(f"Email not sent: {e}")
"""

from typing import Any


class SendoutError(Exception):
    """Base exception for all sendout errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class ConfigError(SendoutError):
    """Configuration error preventing the email from being sent out.

    Raised when required settings are missing, or when the provider rejects
    the configured API token.
    """

    def __str__(self) -> str:
        """Return the message prefixed as a configuration error."""
        return f"email configuration error: {self.message}"


class SendFailedError(SendoutError):
    """The email failed to send.

    This includes connection failures, timeouts, non-success HTTP responses
    from the provider (except rate limiting) and receipts that could not be
    parsed.
    """

    def __str__(self) -> str:
        """Return the message prefixed as a send failure."""
        return f"failed to send email: {self.message}"


class ConnectionError(SendFailedError):
    """Failed to connect to the email provider.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed to connect.
    """

    def __init__(self, message: str = "connection failed", url: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            url: The URL that failed to connect.
        """
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including URL if available."""
        base = super().__str__()
        if self.url:
            return f"{base} (url: {self.url})"
        return base


class TimeoutError(SendFailedError):
    """Request to the email provider timed out.

    Attributes:
        message: Human-readable error description.
        timeout: The timeout value in seconds, if known.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str = "connection timeout",
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            timeout: The timeout value in seconds.
            url: The URL that timed out.
        """
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including timeout if available."""
        parts = []
        if self.timeout is not None:
            parts.append(f"timeout: {self.timeout}s")
        if self.url:
            parts.append(f"url: {self.url}")
        base = super().__str__()
        return f"{base} ({', '.join(parts)})" if parts else base


class APIError(SendFailedError):
    """Provider returned an error response.

    Attributes:
        message: Human-readable error message from the provider.
        status_code: HTTP status code.
        error_code: Provider error code from the response body (if available).
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: int | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message from the provider.
            status_code: HTTP status code.
            error_code: Provider error code from the response body.
            response_body: Raw response body for debugging.
        """
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including status and error code."""
        if self.error_code is not None:
            return f"failed to send email: [HTTP {self.status_code}] [{self.error_code}] {self.message}"
        return f"failed to send email: [HTTP {self.status_code}] {self.message}"


class RateLimitExceededError(SendoutError):
    """The provider rate limit has been exhausted (HTTP 429)."""

    def __init__(self, message: str = "rate limit exceeded") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)


class InvalidRecipientError(SendoutError):
    """The recipient email address is invalid or rejected.

    Raised when an `EmailMessage` is built with a malformed or empty
    recipient list, when a recipient list exceeds the provider's limits, or
    when the provider rejects the recipient (for example an inactive or
    suppressed address).

    Attributes:
        error_code: Provider error code, when the rejection came from the API.
    """

    def __init__(self, message: str, error_code: int | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of the rejected recipient(s).
            error_code: Provider error code, when the rejection came from
                the API.
        """
        self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return the message prefixed as a recipient error."""
        return f"invalid recipient: {self.message}"
