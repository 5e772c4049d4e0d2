"""Gmail Summarizer - AI-powered summaries of your most recent emails.

This package connects a Gmail account over OAuth2, fetches the newest
messages, extracts their plain-text content and asks an LLM for a short
summary of each one.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from gmail_summarizer.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
