"""Chat-completion client used to summarize single emails.

This module talks to any OpenAI-compatible chat endpoint through the
official SDK. Point `openai_base_url` at a local Ollama server to keep mail
on your own machine.
"""

from typing import Any, Optional

import structlog
from openai import AsyncOpenAI, OpenAIError

from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import ConfigurationError, SummarizationError
from gmail_summarizer.models import ExtractedEmail

logger = structlog.get_logger()

SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes emails concisely. "
    "Provide a 1-2 sentence summary that captures the key point or action item of the email."
)
FALLBACK_SUMMARY = "Unable to summarize."


def build_messages(email: ExtractedEmail) -> list[dict[str, str]]:
    """Build the role-tagged prompt for one email."""

    user_prompt = (
        "Please summarize this email:\n\n"
        f"From: {email.sender}\n"
        f"Subject: {email.subject}\n\n"
        f"Body:\n{email.body}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


class SummarizationClient:
    """LLM client producing 1-2 sentence email summaries.

    One call per email, no retries. A failed call is raised, not papered
    over, so the caller can fail the whole batch.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """Initialize the summarization client.

        Args:
            settings: Application settings. If None, uses default settings.
            client: Preconfigured SDK client. If None, one is built from settings.

        Raises:
            ConfigurationError: If no SDK client can be built from settings.
        """
        from gmail_summarizer.config import get_settings

        self.settings = settings or get_settings()
        if client is None:
            try:
                client = AsyncOpenAI(
                    api_key=self.settings.openai_api_key,
                    base_url=self.settings.openai_base_url,
                    max_retries=0,
                )
            except OpenAIError as exc:
                raise ConfigurationError(
                    "LLM client is not configured. Set GMAIL_SUMMARIZER_OPENAI_API_KEY."
                ) from exc
        self._client = client
        logger.info(
            "summarization_client_initialized",
            model=self.settings.openai_model,
            base_url=self.settings.openai_base_url,
        )

    async def summarize(self, email: ExtractedEmail) -> str:
        """Summarize a single email.

        Args:
            email: Extracted email with a bounded-length body.

        Returns:
            The model's reply, or a fixed fallback if it returned no text.

        Raises:
            SummarizationError: If the provider call fails.
        """
        logger.info(
            "summarizing_email",
            message_id=email.message_id,
            model=self.settings.openai_model,
            body_length=len(email.body),
        )

        try:
            completion = await self._client.chat.completions.create(
                model=self.settings.openai_model,
                messages=build_messages(email),  # type: ignore[arg-type]
                max_tokens=self.settings.summary_max_tokens,
                temperature=self.settings.summary_temperature,
            )
        except OpenAIError as exc:
            logger.exception("summarization_failed", message_id=email.message_id, error=str(exc))
            raise SummarizationError(str(exc)) from exc

        return _first_choice_text(completion) or FALLBACK_SUMMARY


def _first_choice_text(completion: Any) -> Optional[str]:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str) and content.strip():
        return content
    return None
