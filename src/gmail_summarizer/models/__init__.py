"""Data models for Gmail Summarizer.

This module contains Pydantic models for data validation and serialization.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gmail_summarizer.models.email import EmailSummary, ExtractedEmail


class SummarizeResponse(BaseModel):
    """Successful response of the summarize endpoint."""

    summaries: list[EmailSummary] = Field(
        default_factory=list,
        description="Summaries in the provider's newest-first order",
    )


class AuthUrlResponse(BaseModel):
    """Response carrying the Google consent screen URL."""

    model_config = ConfigDict(populate_by_name=True)

    auth_url: str = Field(alias="authUrl", description="Google OAuth authorization URL")


class ErrorResponse(BaseModel):
    """Error payload returned for failed API calls."""

    error: str = Field(description="User-facing error message")


class PageState(BaseModel):
    """Initial state of the workflow page after an OAuth redirect."""

    status: str = Field(description="Workflow status name")
    error: Optional[str] = Field(default=None, description="User-facing error message")


__all__ = [
    "AuthUrlResponse",
    "EmailSummary",
    "ErrorResponse",
    "ExtractedEmail",
    "PageState",
    "SummarizeResponse",
]
