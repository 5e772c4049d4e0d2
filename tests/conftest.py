"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import base64
from typing import Any

import pytest

from gmail_summarizer.exceptions import SummarizationError
from gmail_summarizer.models import ExtractedEmail


def b64url(text: str) -> str:
    """Encode text the way Gmail encodes body payloads (URL-safe, unpadded)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def build_message(
    message_id: str,
    *,
    sender: str | None = "Jane Doe <jane@example.com>",
    subject: str | None = "Quarterly report",
    date: str | None = "Mon, 5 Jan 2026 15:07:00 +0000",
    body: str = "Please review the attached report by Friday.",
) -> dict[str, Any]:
    """Build a multipart/alternative Gmail message in format=full."""
    headers = []
    for name, value in (("From", sender), ("Subject", subject), ("Date", date)):
        if value is not None:
            headers.append({"name": name, "value": value})

    return {
        "id": message_id,
        "threadId": f"thread-{message_id}",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": headers,
            "body": {"size": 0},
            "parts": [
                {"mimeType": "text/plain", "body": {"data": b64url(body)}},
                {"mimeType": "text/html", "body": {"data": b64url(f"<p>{body}</p>")}},
            ],
        },
    }


class FakeGmailClient:
    """In-memory stand-in for GmailClient."""

    def __init__(
        self,
        messages: list[dict[str, Any]],
        *,
        fail_on: dict[str, Exception] | None = None,
        list_error: Exception | None = None,
    ) -> None:
        self.messages = {m["id"]: m for m in messages}
        self.order = [m["id"] for m in messages]
        self.fail_on = fail_on or {}
        self.list_error = list_error
        self.calls: list[tuple[str, Any]] = []

    async def list_messages(self, max_results: int | None = None) -> list[dict[str, Any]]:
        self.calls.append(("list", max_results))
        if self.list_error is not None:
            raise self.list_error
        return [{"id": mid, "threadId": f"thread-{mid}"} for mid in self.order[:max_results]]

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        self.calls.append(("get", message_id))
        if message_id in self.fail_on:
            raise self.fail_on[message_id]
        return self.messages[message_id]


class FakeSummarizationClient:
    """Summarizer stand-in that echoes the subject."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.seen: list[ExtractedEmail] = []

    async def summarize(self, email: ExtractedEmail) -> str:
        self.seen.append(email)
        if email.message_id in self.fail_for:
            raise SummarizationError(f"provider failed for {email.message_id}")
        return f"Summary of {email.subject}"


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from gmail_summarizer.config import Settings

    return Settings(
        _env_file=None,
        google_client_id="test-client.apps.googleusercontent.com",
        google_client_secret="test-secret",
        google_redirect_uri="http://testserver/api/gmail/callback",
        openai_api_key="sk-test",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def encode_b64url():
    """Provide the Gmail body encoder."""
    return b64url


@pytest.fixture
def make_message():
    """Provide a builder for multipart/alternative Gmail messages."""
    return build_message


@pytest.fixture
def fake_gmail():
    """Provide the in-memory GmailClient class."""
    return FakeGmailClient


@pytest.fixture
def fake_summarizer():
    """Provide the subject-echoing summarizer class."""
    return FakeSummarizationClient


@pytest.fixture
def sample_email_data() -> dict[str, Any]:
    """Provide a full Gmail message with nested parts."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "Weekly Newsletter - Python Tips",
        "payload": {
            "mimeType": "multipart/mixed",
            "headers": [
                {"name": "Subject", "value": "Weekly Newsletter - Python Tips"},
                {"name": "From", "value": "Python Weekly <newsletter@python.org>"},
                {"name": "To", "value": "user@example.com"},
                {"name": "Date", "value": "Tue, 6 Jan 2026 09:30:00 +0000"},
            ],
            "body": {"size": 0},
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "body": {"size": 0},
                    "parts": [
                        {"mimeType": "text/plain", "body": {"data": b64url("Welcome to this week's tips!\n")}},
                        {"mimeType": "text/html", "body": {"data": b64url("<b>Welcome</b>")}},
                    ],
                },
                {"mimeType": "text/plain", "body": {"data": b64url("Unsubscribe: https://python.org/u")}},
                {"mimeType": "application/pdf", "filename": "tips.pdf", "body": {"attachmentId": "att1"}},
            ],
        },
    }
