"""Server-side store for connected Gmail sessions.

The browser cookie only carries an opaque session identifier. The OAuth
token bundle stays in process memory and expires together with the cookie.
"""

from __future__ import annotations

import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger()

TokenBundle = dict[str, Any]


@dataclass(frozen=True)
class SessionEntry:
    """A stored token bundle and its absolute expiry (monotonic seconds)."""

    tokens: TokenBundle
    expires_at: float


class SessionStore:
    """In-memory session store with per-entry expiry."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        """Create a store.

        Args:
            ttl_seconds: Lifetime of each session.
            clock: Monotonic time source, injectable for tests.
        """

        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, SessionEntry] = {}
        # Sync endpoints run in a thread pool.
        self._lock = threading.Lock()

    def create(self, tokens: TokenBundle) -> str:
        """Store a token bundle and return its new session identifier."""

        session_id = secrets.token_urlsafe(32)
        with self._lock:
            self._purge_expired()
            self._entries[session_id] = SessionEntry(
                tokens=dict(tokens),
                expires_at=self._clock() + self._ttl_seconds,
            )
        logger.info("session_created", ttl_seconds=self._ttl_seconds)
        return session_id

    def get(self, session_id: str | None) -> TokenBundle | None:
        """Return a copy of the token bundle, or None if unknown or expired."""

        if not session_id:
            return None
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[session_id]
                logger.info("session_expired")
                return None
            return dict(entry.tokens)

    def delete(self, session_id: str | None) -> None:
        if not session_id:
            return
        with self._lock:
            removed = self._entries.pop(session_id, None)
        if removed is not None:
            logger.info("session_deleted")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [sid for sid, entry in self._entries.items() if entry.expires_at <= now]
        for sid in expired:
            del self._entries[sid]
