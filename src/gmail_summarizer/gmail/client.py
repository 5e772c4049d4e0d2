"""Gmail API client implementation.

This module provides a read-only client for the two Gmail API calls the
summarizer needs: listing the newest messages and fetching one in full.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
    `httplib2` transports are not thread-safe, so every call builds its own
    service object inside the worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import structlog
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.errors import HttpError

from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import AuthenticationExpiredError, GmailAPIError

logger = structlog.get_logger()

ServiceFactory = Callable[[Credentials], Any]


def build_gmail_service(credentials: Credentials) -> Any:
    # Imported lazily to keep import-time cost low and tests fast.
    from googleapiclient.discovery import build

    # cache_discovery=False prevents writing discovery docs to disk.
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


def is_authorization_error(exc: BaseException) -> bool:
    """Return True if Google rejected the credential rather than the request."""

    if isinstance(exc, RefreshError):
        return True
    if isinstance(exc, HttpError):
        return exc.resp.status == 401
    return False


class GmailClient:
    """Gmail API client bound to one user's credentials.

    The client only reads; it never modifies, sends or deletes mail.
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: Settings | None = None,
        service_factory: ServiceFactory | None = None,
    ) -> None:
        """Initialize Gmail client.

        Args:
            credentials: Authorized user credentials for the Gmail account.
            settings: Application settings. If None, uses default settings.
            service_factory: Builds a Gmail service from credentials.
                Defaults to the discovery-based Google API client.
        """
        from gmail_summarizer.config import get_settings

        self.settings = settings or get_settings()
        self._credentials = credentials
        self._service_factory = service_factory or build_gmail_service

    async def list_messages(self, max_results: int | None = None) -> list[dict[str, Any]]:
        """List the newest messages in the mailbox.

        Args:
            max_results: Maximum number of messages to return.
                Defaults to `gmail_max_results` from settings.

        Returns:
            List of message reference dictionaries (``id``, ``threadId``),
            newest first.

        Raises:
            AuthenticationExpiredError: If Google rejects the credential.
            GmailAPIError: If the API request fails for any other reason.
        """

        resolved_max = max_results or self.settings.gmail_max_results
        logger.info("listing_messages", max_results=resolved_max)

        try:
            return await asyncio.to_thread(self._list_messages_sync, resolved_max)
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc, "gmail_list_messages_failed") from exc

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        """Get a specific message by ID.

        Args:
            message_id: The Gmail message ID.
            format: Gmail response format; ``full`` includes the MIME part tree.

        Returns:
            Message data dictionary.

        Raises:
            AuthenticationExpiredError: If Google rejects the credential.
            GmailAPIError: If the API request fails for any other reason.
        """

        logger.info("getting_message", message_id=message_id, format=format)

        try:
            return await asyncio.to_thread(self._get_message_sync, message_id, format)
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc, "gmail_get_message_failed", message_id=message_id) from exc

    def _translate_error(self, exc: Exception, event: str, **context: Any) -> Exception:
        if is_authorization_error(exc):
            logger.warning("gmail_authorization_rejected", error=str(exc), **context)
            return AuthenticationExpiredError(str(exc))
        logger.exception(event, error=str(exc), **context)
        return GmailAPIError(str(exc))

    def _list_messages_sync(self, max_results: int) -> list[dict[str, Any]]:
        service = self._service_factory(self._credentials)
        response = service.users().messages().list(userId="me", maxResults=max_results).execute()
        return list(response.get("messages", []) or [])

    def _get_message_sync(self, message_id: str, format: str) -> dict[str, Any]:
        service = self._service_factory(self._credentials)
        request = service.users().messages().get(userId="me", id=message_id, format=format)
        return request.execute()
