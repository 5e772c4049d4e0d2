"""Google OAuth2 web flow for connecting a Gmail account.

The flow is stateless on our side: the consent URL is built from the client
configuration alone, and the callback exchanges the returned code for a token
bundle that is then handed to the session store.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

import structlog
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import ConfigurationError, OAuthExchangeError

logger = structlog.get_logger()

TokenBundle = dict[str, Any]


def credentials_to_bundle(credentials: Credentials) -> TokenBundle:
    """Serialize the parts of a credential that change per user.

    The client id and secret come from settings and are not stored.
    """

    expiry = credentials.expiry
    return {
        "token": credentials.token,
        "refresh_token": credentials.refresh_token,
        "token_uri": credentials.token_uri,
        "scopes": list(credentials.scopes) if credentials.scopes else [],
        "expiry": expiry.isoformat() if expiry else None,
    }


def bundle_to_credentials(bundle: TokenBundle, settings: Settings) -> Credentials:
    """Rebuild Google credentials from a stored token bundle."""

    expiry_raw = bundle.get("expiry")
    # google-auth compares expiry against a naive UTC timestamp.
    expiry = datetime.fromisoformat(expiry_raw).replace(tzinfo=None) if expiry_raw else None

    return Credentials(
        token=bundle.get("token"),
        refresh_token=bundle.get("refresh_token"),
        token_uri=bundle.get("token_uri") or settings.google_token_uri,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        scopes=bundle.get("scopes") or [settings.gmail_scope],
        expiry=expiry,
    )


class GmailOAuth:
    """Builds consent URLs and exchanges authorization codes."""

    def __init__(self, settings: Settings | None = None) -> None:
        from gmail_summarizer.config import get_settings

        self.settings = settings or get_settings()

    def _flow(self) -> Flow:
        if not (self.settings.google_client_id and self.settings.google_client_secret):
            raise ConfigurationError(
                "Google OAuth is not configured. Set GMAIL_SUMMARIZER_GOOGLE_CLIENT_ID "
                "and GMAIL_SUMMARIZER_GOOGLE_CLIENT_SECRET."
            )

        client_config = {
            "web": {
                "client_id": self.settings.google_client_id,
                "client_secret": self.settings.google_client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": self.settings.google_token_uri,
                "redirect_uris": [self.settings.google_redirect_uri],
            }
        }
        # The code verifier would have to survive between the two requests;
        # the confidential web client authenticates with its secret instead.
        return Flow.from_client_config(
            client_config,
            scopes=[self.settings.gmail_scope],
            redirect_uri=self.settings.google_redirect_uri,
            autogenerate_code_verifier=False,
        )

    def authorization_url(self) -> str:
        """Return the consent URL requesting offline, read-only Gmail access.

        Raises:
            ConfigurationError: If the OAuth client is not configured.
        """

        url, _state = self._flow().authorization_url(access_type="offline", prompt="consent")
        logger.info("oauth_authorization_url_created", scope=self.settings.gmail_scope)
        return url

    async def exchange_code(self, code: str) -> TokenBundle:
        """Exchange an authorization code for a token bundle.

        Raises:
            ConfigurationError: If the OAuth client is not configured.
            OAuthExchangeError: If Google refuses the code or cannot be reached.
        """

        flow = self._flow()
        try:
            await asyncio.to_thread(flow.fetch_token, code=code)
        except Exception as exc:  # noqa: BLE001
            logger.exception("oauth_token_exchange_failed", error=str(exc))
            raise OAuthExchangeError(str(exc)) from exc

        logger.info("oauth_token_exchange_completed")
        return credentials_to_bundle(flow.credentials)
