"""HTTP surface of Gmail Summarizer."""

from .app import create_app

__all__ = ["create_app"]
