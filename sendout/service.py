"""Email service interfaces and an in-memory test double.

`EmailService` and `AsyncEmailService` are the seams applications depend on;
provider clients implement them. `MockEmailSender` records messages instead
of sending them, so application code can be tested without HTTP.
"""

import threading
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sendout.exceptions import SendoutError

EmailT = TypeVar("EmailT")
ResponseT = TypeVar("ResponseT")


class EmailService(ABC, Generic[EmailT, ResponseT]):
    """Abstract interface for synchronous email senders."""

    @abstractmethod
    def send_email(self, email: EmailT) -> ResponseT:
        """Send a single email.

        Args:
            email: The message to send.

        Returns:
            The provider-specific result of the send.

        Raises:
            SendoutError: If the email could not be sent.
        """
        raise NotImplementedError


class AsyncEmailService(ABC, Generic[EmailT, ResponseT]):
    """Abstract interface for asynchronous email senders."""

    @abstractmethod
    async def send_email(self, email: EmailT) -> ResponseT:
        """Send a single email. See `EmailService.send_email`."""
        raise NotImplementedError


class MockEmailSender(EmailService[EmailT, None]):
    """Email sender that stores messages in an outbox instead of sending them.

    Example:
        sender = MockEmailSender()
        signup_flow(sender)
        assert sender.total_emails_sent() == 1

        failing = MockEmailSender.with_error(RateLimitExceededError())

    Attributes:
        failure_error: Error raised by every send, if set.
    """

    def __init__(self, failure_error: SendoutError | None = None) -> None:
        self.failure_error = failure_error
        self._outbox: list[EmailT] = []
        self._lock = threading.Lock()

    @classmethod
    def with_error(cls, error: SendoutError) -> "MockEmailSender[EmailT]":
        """Create a sender whose every send fails with ``error``."""
        return cls(failure_error=error)

    def send_email(self, email: EmailT) -> None:
        """Record the email, or raise the configured error."""
        if self.failure_error is not None:
            raise self.failure_error
        with self._lock:
            self._outbox.append(email)

    async def asend_email(self, email: EmailT) -> None:
        """Async variant of `send_email`."""
        self.send_email(email)

    def sent_emails(self) -> list[EmailT]:
        """Return a copy of every email recorded so far, in send order."""
        with self._lock:
            return list(self._outbox)

    def total_emails_sent(self) -> int:
        with self._lock:
            return len(self._outbox)
