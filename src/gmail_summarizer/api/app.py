"""FastAPI application factory.

Wires settings, the session store, the OAuth flow and the summarizer
workflow into one app, and maps pipeline exceptions to HTTP responses.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gmail_summarizer import __version__
from gmail_summarizer.agent.status import status_from_query
from gmail_summarizer.agent.summarizer import SummarizerWorkflow
from gmail_summarizer.api.deps import WorkflowFactory, session_id_from
from gmail_summarizer.api.gmail import router as gmail_router
from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import (
    AuthenticationExpiredError,
    AuthenticationMissingError,
    ProcessingError,
)
from gmail_summarizer.gmail.client import GmailClient
from gmail_summarizer.gmail.oauth import GmailOAuth, bundle_to_credentials
from gmail_summarizer.llm.client import SummarizationClient
from gmail_summarizer.log import configure_logging
from gmail_summarizer.models import PageState
from gmail_summarizer.session import SessionStore

logger = structlog.get_logger()

NOT_AUTHENTICATED = "Not authenticated. Please connect Gmail first."
SESSION_EXPIRED = "Gmail session expired. Please reconnect."
SUMMARIZE_FAILED = "Failed to summarize emails. Please try again."


def default_workflow_factory(settings: Settings) -> WorkflowFactory:
    """Build a workflow per request from the caller's token bundle."""

    def factory(tokens: dict[str, Any]) -> SummarizerWorkflow:
        credentials = bundle_to_credentials(tokens, settings)
        return SummarizerWorkflow(
            gmail_client=GmailClient(credentials, settings),
            summarization_client=SummarizationClient(settings),
            settings=settings,
        )

    return factory


async def _handle_missing(request: Request, exc: AuthenticationMissingError) -> JSONResponse:
    logger.info("summarize_rejected_unauthenticated")
    return JSONResponse(status_code=401, content={"error": NOT_AUTHENTICATED})


async def _handle_expired(request: Request, exc: AuthenticationExpiredError) -> JSONResponse:
    settings: Settings = request.app.state.settings
    request.app.state.session_store.delete(session_id_from(request))
    logger.warning("session_invalidated", reason=str(exc))

    response = JSONResponse(status_code=401, content={"error": SESSION_EXPIRED})
    response.delete_cookie(settings.session_cookie_name, path="/")
    return response


async def _handle_processing(request: Request, exc: ProcessingError) -> JSONResponse:
    logger.error("summarize_failed", error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": SUMMARIZE_FAILED})


def create_app(
    settings: Optional[Settings] = None,
    *,
    session_store: Optional[SessionStore] = None,
    oauth: Optional[GmailOAuth] = None,
    workflow_factory: Optional[WorkflowFactory] = None,
) -> FastAPI:
    """Create the web application.

    Args:
        settings: Application settings. If None, uses default settings.
        session_store: Session store. If None, an in-memory store is created.
        oauth: OAuth flow helper. If None, one is built from settings.
        workflow_factory: Builds a workflow from a token bundle. If None,
            the Gmail API and OpenAI-backed workflow is used.

    Returns:
        The configured FastAPI application.
    """
    from gmail_summarizer.config import get_settings

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="Gmail Summarizer", version=__version__, debug=settings.debug)
    app.state.settings = settings
    app.state.session_store = (
        session_store if session_store is not None else SessionStore(settings.session_ttl_seconds)
    )
    app.state.oauth = oauth if oauth is not None else GmailOAuth(settings)
    app.state.workflow_factory = (
        workflow_factory if workflow_factory is not None else default_workflow_factory(settings)
    )

    app.include_router(gmail_router)
    app.add_exception_handler(AuthenticationMissingError, _handle_missing)  # type: ignore[arg-type]
    app.add_exception_handler(AuthenticationExpiredError, _handle_expired)  # type: ignore[arg-type]
    app.add_exception_handler(ProcessingError, _handle_processing)  # type: ignore[arg-type]

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(settings.workflow_path, response_model=PageState)
    def workflow_page(connected: Optional[str] = None, error: Optional[str] = None) -> PageState:
        status, message = status_from_query(connected=connected, error=error)
        return PageState(status=status.value, error=message)

    logger.info("app_created", version=__version__, workflow_path=settings.workflow_path)
    return app
