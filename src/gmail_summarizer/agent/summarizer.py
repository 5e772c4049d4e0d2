"""Email summarization workflow.

This module provides the workflow that turns a connected mailbox into an
ordered list of summaries.
"""

from __future__ import annotations

import asyncio
from datetime import tzinfo
from zoneinfo import ZoneInfo

import structlog

from gmail_summarizer.config import Settings
from gmail_summarizer.gmail.client import GmailClient
from gmail_summarizer.gmail.parsing import display_sender, format_date, message_to_extracted_email
from gmail_summarizer.llm.client import SummarizationClient
from gmail_summarizer.models import EmailSummary, ExtractedEmail

logger = structlog.get_logger()


class SummarizerWorkflow:
    """Fetches the newest messages and summarizes each one.

    Both the fetch and the summarize stage fan out over all messages at once
    and wait for every call. A single failure fails the whole run; no partial
    list is ever returned.
    """

    def __init__(
        self,
        gmail_client: GmailClient,
        summarization_client: SummarizationClient,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            gmail_client: Gmail API client bound to the user's credentials.
            summarization_client: LLM client used for each summary.
            settings: Application settings. If None, uses default settings.
        """
        from gmail_summarizer.config import get_settings

        self.settings = settings or get_settings()
        self.gmail_client = gmail_client
        self.summarization_client = summarization_client
        self._tz: tzinfo | None = (
            ZoneInfo(self.settings.display_timezone) if self.settings.display_timezone else None
        )

    async def run(self) -> list[EmailSummary]:
        """Summarize the most recent messages, newest first.

        Raises:
            AuthenticationExpiredError: If Google rejects the credential at any step.
            ProcessingError: If any fetch or summarization fails.
        """
        max_results = self.settings.gmail_max_results
        logger.info("summarize_workflow_started", max_results=max_results)

        refs = await self.gmail_client.list_messages(max_results=max_results)
        message_ids = [str(r["id"]) for r in refs if r.get("id")]
        if not message_ids:
            logger.info("summarize_workflow_completed", message_count=0)
            return []

        emails = await asyncio.gather(*(self.fetch_email(mid) for mid in message_ids))
        summaries = await asyncio.gather(*(self.summarize_email(e) for e in emails))

        logger.info("summarize_workflow_completed", message_count=len(summaries))
        return list(summaries)

    async def fetch_email(self, message_id: str) -> ExtractedEmail:
        """Fetch one message in full and extract its headers and cleaned body."""
        message = await self.gmail_client.get_message(message_id, format="full")
        return message_to_extracted_email(
            message,
            max_chars=self.settings.body_max_chars,
            max_depth=self.settings.mime_max_depth,
        )

    async def summarize_email(self, email: ExtractedEmail) -> EmailSummary:
        """Summarize one extracted email and format it for display."""
        summary = await self.summarization_client.summarize(email)
        return EmailSummary(
            sender=display_sender(email.sender),
            subject=email.subject,
            summary=summary,
            date=format_date(email.date, self._tz),
        )
