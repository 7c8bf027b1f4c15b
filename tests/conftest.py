"""Pytest configuration and shared fixtures."""

import uuid
from collections.abc import Callable, Iterator

import httpx
import pytest

from sendout import Body, EmailMessage, ServiceConfig

BASE_URL = "http://postmark.test"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real SENDOUT_* variables from leaking into tests."""
    for name in ("BASE_URL", "SERVER_TOKEN", "ACCOUNT_TOKEN", "FROM_EMAIL", "TIMEOUT"):
        monkeypatch.delenv(f"SENDOUT_{name}", raising=False)


@pytest.fixture
def config() -> ServiceConfig:
    """Provide a configuration with random server and account tokens."""
    return ServiceConfig(
        base_url=BASE_URL,
        server_token=str(uuid.uuid4()),
        account_token=str(uuid.uuid4()),
        from_email="sender@example.com",
    )


@pytest.fixture
def email_message() -> EmailMessage:
    """Provide a minimal valid text email."""
    return EmailMessage(
        from_="wangari.maathai@example.com",
        to=["kwame.nkrumah@example.com"],
        subject="Green Belt Movement Monthly Update",
        body=Body.text_body("We planted 10,000 trees across Kenya this month."),
    )


@pytest.fixture
def delivery_receipt() -> dict:
    """Provide a Postmark receipt payload for an accepted message."""
    return {
        "To": "kwame.nkrumah@example.com",
        "SubmittedAt": "2026-02-15T10:00:00Z",
        "MessageID": "msg-abc-123",
        "ErrorCode": 0,
        "Message": "OK",
    }


@pytest.fixture
def mock_client() -> Iterator[Callable[[Handler], httpx.Client]]:
    """Provide a factory for httpx clients backed by a mock transport."""
    clients: list[httpx.Client] = []

    def factory(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
