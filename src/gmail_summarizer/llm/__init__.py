"""LLM access for email summarization."""

from .client import SummarizationClient

__all__ = ["SummarizationClient"]
