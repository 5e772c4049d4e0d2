"""Request-scoped accessors for the objects wired up in `create_app`."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Request

from gmail_summarizer.agent.summarizer import SummarizerWorkflow
from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import AuthenticationMissingError
from gmail_summarizer.gmail.oauth import GmailOAuth
from gmail_summarizer.session import SessionStore

WorkflowFactory = Callable[[dict[str, Any]], SummarizerWorkflow]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_oauth(request: Request) -> GmailOAuth:
    return request.app.state.oauth


def get_workflow_factory(request: Request) -> WorkflowFactory:
    return request.app.state.workflow_factory


def session_id_from(request: Request) -> str | None:
    return request.cookies.get(get_app_settings(request).session_cookie_name)


def require_tokens(request: Request) -> dict[str, Any]:
    """Return the token bundle of the caller's session.

    Raises:
        AuthenticationMissingError: If there is no cookie or the session is
            unknown or expired.
    """
    tokens = get_session_store(request).get(session_id_from(request))
    if tokens is None:
        raise AuthenticationMissingError("No Gmail session")
    return tokens
