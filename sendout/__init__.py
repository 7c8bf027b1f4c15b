"""sendout: transactional email client library.

Model an email, send it through a provider API (Postmark) with a
caller-supplied httpx client, and get back a delivery receipt.

Example:
    Synchronous usage::

        import httpx
        from sendout import Body, EmailMessage, ServiceConfig
        from sendout.postmark import PostmarkClient

        with httpx.Client() as http:
            client = PostmarkClient(http, ServiceConfig.from_env())
            delivery = client.send_email(
                EmailMessage(
                    to=["recipient@example.com"],
                    subject="Hello",
                    body=Body.text_body("Test message"),
                )
            )

    Asynchronous usage::

        from sendout.postmark import AsyncPostmarkClient

        async with httpx.AsyncClient() as http:
            client = AsyncPostmarkClient(http, ServiceConfig.from_env())
            delivery = await client.send_email(message)

Exports:
    Models: EmailMessage, Body, Header, Recipients, Attachment, EmailDelivery.
    Configuration: ServiceConfig.
    Interfaces: EmailService, AsyncEmailService, MockEmailSender, ApiRequest.

    Exceptions:
        SendoutError: Base exception for all library errors.
        ConfigError: Missing or rejected configuration.
        SendFailedError: The email could not be sent.
        ConnectionError: Failed to connect to the provider.
        TimeoutError: Request timed out.
        APIError: Provider returned an error response.
        RateLimitExceededError: Provider answered HTTP 429.
        InvalidRecipientError: Recipient invalid or rejected.
"""

from sendout._base import ApiRequest
from sendout.config import ServiceConfig
from sendout.exceptions import (
    APIError,
    ConfigError,
    ConnectionError,
    InvalidRecipientError,
    RateLimitExceededError,
    SendFailedError,
    SendoutError,
    TimeoutError,
)
from sendout.models import (
    Attachment,
    Body,
    EmailAddress,
    EmailDelivery,
    EmailMessage,
    Header,
    Recipients,
)
from sendout.service import AsyncEmailService, EmailService, MockEmailSender

__all__ = [
    # Models
    "EmailMessage",
    "Body",
    "Header",
    "Recipients",
    "EmailAddress",
    "Attachment",
    "EmailDelivery",
    # Configuration
    "ServiceConfig",
    # Interfaces
    "ApiRequest",
    "EmailService",
    "AsyncEmailService",
    "MockEmailSender",
    # Exceptions
    "SendoutError",
    "ConfigError",
    "SendFailedError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
    "RateLimitExceededError",
    "InvalidRecipientError",
]
