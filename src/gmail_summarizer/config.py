"""Configuration management for Gmail Summarizer.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the GMAIL_SUMMARIZER_ prefix (e.g., GMAIL_SUMMARIZER_OPENAI_MODEL).
    """

    model_config = SettingsConfigDict(
        env_prefix="GMAIL_SUMMARIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google OAuth Configuration
    google_client_id: Optional[str] = Field(
        default=None,
        description="OAuth client ID of the Google Cloud web application",
    )
    google_client_secret: Optional[str] = Field(
        default=None,
        description="OAuth client secret of the Google Cloud web application",
    )
    google_redirect_uri: str = Field(
        default="http://localhost:8000/api/gmail/callback",
        description="Redirect URI registered for the OAuth client",
    )
    google_token_uri: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="Token endpoint used for code exchange and refresh",
    )

    # Gmail Configuration
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.readonly",
        description="OAuth scope used for Gmail access. Read-only is all we need.",
    )
    gmail_max_results: int = Field(
        default=10,
        description="Number of most recent messages to summarize",
    )

    # LLM Configuration
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for the chat-completion provider. Falls back to OPENAI_API_KEY.",
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        description="Chat model used to summarize each email",
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of an OpenAI-compatible endpoint (e.g. a local Ollama server)",
    )
    summary_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for summaries",
    )
    summary_max_tokens: int = Field(
        default=100,
        description="Output token ceiling for each summary",
    )

    # Extraction Configuration
    body_max_chars: int = Field(
        default=2000,
        description="Email bodies longer than this are truncated before summarization",
    )
    mime_max_depth: int = Field(
        default=50,
        description="MIME parts nested deeper than this are ignored during extraction",
    )

    # Session Configuration
    session_cookie_name: str = Field(
        default="gmail_session",
        description="Name of the cookie carrying the session identifier",
    )
    session_ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of a connected Gmail session in seconds",
    )
    cookie_secure: bool = Field(
        default=False,
        description="Mark the session cookie Secure (enable in production behind HTTPS)",
    )
    workflow_path: str = Field(
        default="/workflows/gmail-summarizer",
        description="Page the OAuth callback redirects back to",
    )
    display_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for displayed dates. If unset, the sender's offset is kept.",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
