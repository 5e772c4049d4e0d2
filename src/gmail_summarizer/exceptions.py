"""Custom exceptions for Gmail Summarizer."""


class GmailSummarizerError(Exception):
    """Base exception for all Gmail Summarizer errors."""


class AuthenticationMissingError(GmailSummarizerError):
    """Exception raised when a request carries no usable Gmail session."""


class AuthenticationExpiredError(GmailSummarizerError):
    """Exception raised when Google rejects the stored credential."""


class ProcessingError(GmailSummarizerError):
    """Exception raised for any other failure while building summaries."""


class GmailAPIError(ProcessingError):
    """Exception raised for Gmail API related errors."""


class SummarizationError(ProcessingError):
    """Exception raised when the LLM provider call fails."""


class ConfigurationError(GmailSummarizerError):
    """Exception raised for configuration related errors."""


class OAuthExchangeError(GmailSummarizerError):
    """Exception raised when an authorization code cannot be exchanged."""


class InvalidTransitionError(GmailSummarizerError):
    """Exception raised for an illegal workflow status transition."""
