"""Gmail connection and summarization API.

Routes:
- GET  /api/gmail/auth       consent URL for read-only Gmail access
- GET  /api/gmail/callback   OAuth redirect target; opens a session
- POST /api/gmail/summarize  summaries of the newest messages
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse

from gmail_summarizer.api.deps import (
    WorkflowFactory,
    get_app_settings,
    get_oauth,
    get_session_store,
    get_workflow_factory,
    require_tokens,
)
from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import (
    AuthenticationExpiredError,
    ConfigurationError,
    OAuthExchangeError,
    ProcessingError,
)
from gmail_summarizer.gmail.oauth import GmailOAuth
from gmail_summarizer.models import AuthUrlResponse, ErrorResponse, SummarizeResponse
from gmail_summarizer.session import SessionStore

logger = structlog.get_logger()

router = APIRouter(prefix="/api/gmail", tags=["gmail"])

CONNECT_FAILED = "Failed to connect to Gmail. Please try again."


def _redirect(settings: Settings, query: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.workflow_path}?{query}")


@router.get(
    "/auth",
    response_model=AuthUrlResponse,
    responses={500: {"model": ErrorResponse}},
)
def auth_url(oauth: GmailOAuth = Depends(get_oauth)) -> Any:
    try:
        url = oauth.authorization_url()
    except ConfigurationError as exc:
        logger.error("oauth_not_configured", error=str(exc))
        return JSONResponse(status_code=500, content={"error": CONNECT_FAILED})
    return AuthUrlResponse(auth_url=url)


@router.get("/callback")
async def oauth_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    oauth: GmailOAuth = Depends(get_oauth),
    store: SessionStore = Depends(get_session_store),
) -> RedirectResponse:
    if error:
        logger.info("oauth_callback_denied", error=error)
        return _redirect(settings, "error=access_denied")

    if not code:
        logger.info("oauth_callback_missing_code")
        return _redirect(settings, "error=no_code")

    try:
        tokens = await oauth.exchange_code(code)
    except (OAuthExchangeError, ConfigurationError):
        return _redirect(settings, "error=token_exchange_failed")

    session_id = store.create(tokens)
    response = _redirect(settings, "connected=true")
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        max_age=settings.session_ttl_seconds,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def summarize(
    tokens: dict[str, Any] = Depends(require_tokens),
    factory: WorkflowFactory = Depends(get_workflow_factory),
) -> SummarizeResponse:
    try:
        summaries = await factory(tokens).run()
    except (AuthenticationExpiredError, ProcessingError):
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("summarize_unexpected_error", error=str(exc))
        raise ProcessingError(str(exc)) from exc

    return SummarizeResponse(summaries=summaries)
