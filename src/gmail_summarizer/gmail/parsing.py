"""Helpers for turning full Gmail messages into summarizable text.

Gmail returns message bodies as a tree of MIME parts whose payloads are
encoded with URL-safe base64. The helpers here walk that tree, decode the
plain-text leaves and clean the result up enough to hand to an LLM.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import timezone, tzinfo
from email.utils import parsedate_to_datetime
from typing import Any, Iterable

import structlog

from gmail_summarizer.models import ExtractedEmail

logger = structlog.get_logger()

DEFAULT_SENDER = "Unknown"
DEFAULT_SUBJECT = "No Subject"
DEFAULT_DATE = "Unknown Date"

DEFAULT_MAX_DEPTH = 50
DEFAULT_MAX_CHARS = 2000
TRUNCATION_MARKER = "..."

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def decode_base64url(data: str) -> str:
    """Decode a Gmail body payload.

    The URL-safe alphabet is translated to the standard one and any missing
    padding restored before decoding. Malformed input decodes to an empty
    string; this never raises.
    """

    standard = data.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    try:
        raw = base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def _part_data(part: dict[str, Any]) -> str | None:
    body = part.get("body") or {}
    data = body.get("data")
    return data if isinstance(data, str) and data else None


def extract_text_from_parts(
    parts: Iterable[dict[str, Any]],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> str:
    """Concatenate every text/plain leaf of a MIME part tree, in document order.

    Parts carrying children are recursed into whatever their own type is.
    Everything else, text/html included, contributes nothing.

    Args:
        parts: Ordered child parts of a Gmail message payload.
        max_depth: Parts nested deeper than this are skipped.

    Returns:
        The decoded text, with no separator between parts.
    """

    if _depth >= max_depth:
        logger.warning("mime_depth_limit_reached", max_depth=max_depth)
        return ""

    text = ""
    for part in parts:
        data = _part_data(part)
        if part.get("mimeType") == "text/plain" and data is not None:
            text += decode_base64url(data)
        elif part.get("parts"):
            text += extract_text_from_parts(part["parts"], max_depth=max_depth, _depth=_depth + 1)
    return text


def extract_body(payload: dict[str, Any], *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Extract the raw body text of a message payload.

    A single-part message has its body decoded whatever its MIME type, so an
    HTML-only message still reaches `strip_html`.
    """

    data = _part_data(payload)
    if data is not None:
        return decode_base64url(data)
    if payload.get("parts"):
        return extract_text_from_parts(payload["parts"], max_depth=max_depth)
    return ""


def strip_html(text: str) -> str:
    """Remove tag-like tokens and collapse whitespace.

    This is a heuristic, not a parser: entities are left encoded and the
    content of script/style elements is kept.
    """

    text = _TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_body(body: str, limit: int = DEFAULT_MAX_CHARS) -> str:
    if len(body) > limit:
        return body[:limit] + TRUNCATION_MARKER
    return body


def _header_map(payload: dict[str, Any]) -> dict[str, str]:
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first.
            result.setdefault(name.lower(), value)
    return result


def header_value(payload: dict[str, Any], name: str, default: str) -> str:
    """Return a header from a message payload, or `default` if absent or empty."""

    return _header_map(payload).get(name.lower()) or default


def message_to_extracted_email(
    message: dict[str, Any],
    *,
    max_chars: int = DEFAULT_MAX_CHARS,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ExtractedEmail:
    """Convert a Gmail API message (format=full) to ExtractedEmail.

    Args:
        message: Gmail API message dict.
        max_chars: Body length bound applied after markup stripping.
        max_depth: MIME nesting bound used during extraction.

    Returns:
        ExtractedEmail: Headers plus cleaned, truncated body.
    """

    payload = message.get("payload") or {}

    body = extract_body(payload, max_depth=max_depth)
    body = truncate_body(strip_html(body), max_chars)

    return ExtractedEmail(
        message_id=str(message.get("id") or ""),
        sender=header_value(payload, "From", DEFAULT_SENDER),
        subject=header_value(payload, "Subject", DEFAULT_SUBJECT),
        date=header_value(payload, "Date", DEFAULT_DATE),
        body=body,
    )


def display_sender(sender: str) -> str:
    """Drop a trailing bracketed address: ``Jane Doe <jane@x.com>`` -> ``Jane Doe``."""

    name = sender.split("<", 1)[0].strip()
    if name:
        return name
    # Nothing before the bracket, so show the bare address.
    return sender.strip().strip("<>").strip()


def format_date(value: str, tz: tzinfo | None = None) -> str:
    """Render an RFC 2822 date header as e.g. ``Jan 5, 3:07 PM``.

    Args:
        value: Raw Date header.
        tz: Timezone to display in. If None, the header's own offset is kept.

    Returns:
        The short form, or `value` unchanged when it cannot be parsed.
    """

    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        return value

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz is not None:
        dt = dt.astimezone(tz)

    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt:%b} {dt.day}, {hour}:{dt:%M} {meridiem}"
