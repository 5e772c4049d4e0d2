"""Per-message models produced by the summarization pipeline.

Both models live only for the duration of a single request. Nothing here is
persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExtractedEmail(BaseModel):
    """Headers and cleaned body text pulled out of one Gmail message."""

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(description="Gmail message ID")
    sender: str = Field(description="Raw From header, or a placeholder")
    subject: str = Field(description="Subject header, or a placeholder")
    date: str = Field(description="Raw Date header, or a placeholder")
    body: str = Field(description="Markup-stripped body, bounded in length")


class EmailSummary(BaseModel):
    """A summarized email as shown in the list UI."""

    model_config = ConfigDict(populate_by_name=True)

    # Serialized as "from" to match the front-end contract.
    sender: str = Field(alias="from", description="Sender display name")
    subject: str = Field(description="Subject header")
    summary: str = Field(description="LLM summary or a fixed fallback")
    date: str = Field(description="Short human-readable date")
