"""Postmark email clients.

This module provides PostmarkClient and AsyncPostmarkClient, which send
`EmailMessage`s through Postmark's ``POST /email`` endpoint using a
caller-supplied httpx client.

Example:
    Synchronous usage::

        import httpx
        from sendout import Body, EmailMessage, ServiceConfig
        from sendout.postmark import PostmarkClient

        config = ServiceConfig.from_env()
        with httpx.Client() as http:
            client = PostmarkClient(http, config)
            delivery = client.send_email(
                EmailMessage(
                    to=["kwame@example.com"],
                    subject="Monthly update",
                    body=Body.text_body("We planted 10,000 trees."),
                )
            )
            print(delivery.message_id)

    Asynchronous usage::

        async with httpx.AsyncClient() as http:
            client = AsyncPostmarkClient(http, config)
            delivery = await client.send_email(message)
"""

import logging
from pathlib import Path
from typing import Any

from sendout._base import AsyncBaseClient, BaseClient
from sendout._http import AsyncHTTPClient, HTTPClient
from sendout.config import ServiceConfig
from sendout.models import EmailDelivery, EmailMessage
from sendout.postmark.request import PostmarkEmailRequest
from sendout.postmark.response import PostmarkEmailResponse
from sendout.service import AsyncEmailService, EmailService

logger = logging.getLogger(__name__)


X_POSTMARK_SERVER = "X-Postmark-Server-Token"
X_POSTMARK_ACCOUNT = "X-Postmark-Account-Token"


def _postmark_headers(config: ServiceConfig) -> dict[str, str]:
    headers = {X_POSTMARK_SERVER: config.server_token.get_secret_value()}
    if config.account_token is not None:
        headers[X_POSTMARK_ACCOUNT] = config.account_token.get_secret_value()
    return headers


def _log_delivery(delivery: EmailDelivery, message: EmailMessage) -> None:
    logger.info(
        f"Postmark accepted message {delivery.message_id} "
        f"for {len(message.to)} recipient(s): {delivery.message}"
    )


class PostmarkClient(BaseClient, EmailService[EmailMessage, EmailDelivery]):
    """Synchronous Postmark client.

    Attributes:
        config: The service configuration (base URL, tokens, sender).
    """

    X_POSTMARK_SERVER = X_POSTMARK_SERVER
    X_POSTMARK_ACCOUNT = X_POSTMARK_ACCOUNT

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **client_kwargs: Any) -> "PostmarkClient":
        """Create a client from environment settings and a fresh httpx client.

        The httpx client is owned by the returned client and released by
        `close` or when leaving a ``with`` block. The configuration is loaded
        first, so no httpx client is created when it is missing.

        Args:
            env_file: Optional dotenv file with ``SENDOUT_`` settings.
            **client_kwargs: Passed through to ``httpx.Client``.

        Raises:
            ConfigError: If a required setting is missing or invalid.
        """
        config = ServiceConfig.from_env(env_file)
        return cls(HTTPClient.default(**client_kwargs), config)

    def _auth_headers(self) -> dict[str, str]:
        return _postmark_headers(self.config)

    def send_email(self, email: EmailMessage) -> EmailDelivery:
        """Send an email through Postmark.

        Args:
            email: The message to send. When it has no sender, the
                configured ``from_email`` is used.

        Returns:
            The delivery receipt.

        Raises:
            InvalidRecipientError: If a recipient is invalid or rejected.
            RateLimitExceededError: If Postmark answers HTTP 429.
            ConfigError: If Postmark rejects the token or sender signature.
            SendFailedError: For transport failures, other error responses,
                and receipts that cannot be parsed.
        """
        request = PostmarkEmailRequest.from_message(email, default_from=self.config.from_email)
        response = self._execute(request)
        delivery = PostmarkEmailResponse.from_http_response(response).to_delivery()
        _log_delivery(delivery, email)
        return delivery


class AsyncPostmarkClient(AsyncBaseClient, AsyncEmailService[EmailMessage, EmailDelivery]):
    """Asynchronous Postmark client. See `PostmarkClient`."""

    X_POSTMARK_SERVER = X_POSTMARK_SERVER
    X_POSTMARK_ACCOUNT = X_POSTMARK_ACCOUNT

    @classmethod
    def from_env(
        cls, env_file: str | Path | None = None, **client_kwargs: Any
    ) -> "AsyncPostmarkClient":
        """Create a client from environment settings and a fresh httpx client."""
        config = ServiceConfig.from_env(env_file)
        return cls(AsyncHTTPClient.default(**client_kwargs), config)

    def _auth_headers(self) -> dict[str, str]:
        return _postmark_headers(self.config)

    async def send_email(self, email: EmailMessage) -> EmailDelivery:
        """Send an email through Postmark. See `PostmarkClient.send_email`."""
        request = PostmarkEmailRequest.from_message(email, default_from=self.config.from_email)
        response = await self._execute(request)
        delivery = PostmarkEmailResponse.from_http_response(response).to_delivery()
        _log_delivery(delivery, email)
        return delivery
