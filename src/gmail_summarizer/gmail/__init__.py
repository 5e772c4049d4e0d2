"""Gmail access: API client, OAuth flow and message parsing helpers."""
