"""Status machine behind the workflow page.

The page moves through idle -> connected -> fetching -> done, with error
reachable from any step that talks to the server. Keeping the transitions in
one table means a page can never show "done" alongside a stale error.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from gmail_summarizer.exceptions import InvalidTransitionError


class WorkflowStatus(str, Enum):
    """Workflow page status enumeration."""

    IDLE = "idle"
    CONNECTED = "connected"
    FETCHING = "fetching"
    DONE = "done"
    ERROR = "error"


class WorkflowEvent(str, Enum):
    """Events that move the workflow page between statuses."""

    CONNECT = "connect"
    RUN = "run"
    SUCCEED = "succeed"
    FAIL = "fail"
    RESET = "reset"


TRANSITIONS: dict[tuple[WorkflowStatus, WorkflowEvent], WorkflowStatus] = {
    (WorkflowStatus.IDLE, WorkflowEvent.CONNECT): WorkflowStatus.CONNECTED,
    (WorkflowStatus.IDLE, WorkflowEvent.FAIL): WorkflowStatus.ERROR,
    (WorkflowStatus.CONNECTED, WorkflowEvent.RUN): WorkflowStatus.FETCHING,
    (WorkflowStatus.CONNECTED, WorkflowEvent.FAIL): WorkflowStatus.ERROR,
    (WorkflowStatus.FETCHING, WorkflowEvent.SUCCEED): WorkflowStatus.DONE,
    (WorkflowStatus.FETCHING, WorkflowEvent.FAIL): WorkflowStatus.ERROR,
    (WorkflowStatus.DONE, WorkflowEvent.RUN): WorkflowStatus.FETCHING,
    (WorkflowStatus.DONE, WorkflowEvent.RESET): WorkflowStatus.IDLE,
    (WorkflowStatus.ERROR, WorkflowEvent.CONNECT): WorkflowStatus.CONNECTED,
    (WorkflowStatus.ERROR, WorkflowEvent.RESET): WorkflowStatus.IDLE,
}

CALLBACK_ERROR_MESSAGES: dict[str, str] = {
    "access_denied": "You denied access to Gmail. Please try again and allow access.",
    "no_code": "No authorization code received. Please try again.",
    "token_exchange_failed": "Failed to authenticate with Gmail. Please try again.",
}
DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."


def transition(status: WorkflowStatus, event: WorkflowEvent) -> WorkflowStatus:
    """Return the status reached by applying `event` to `status`.

    Raises:
        InvalidTransitionError: If the event is not allowed in this status.
    """
    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        raise InvalidTransitionError(
            f"Cannot apply {event.value!r} while {status.value!r}"
        ) from None


def error_message(code: str) -> str:
    return CALLBACK_ERROR_MESSAGES.get(code, DEFAULT_ERROR_MESSAGE)


def status_from_query(
    connected: Optional[str] = None,
    error: Optional[str] = None,
) -> tuple[WorkflowStatus, Optional[str]]:
    """Derive the initial page status from OAuth redirect query parameters.

    Returns:
        The status and, for the error status, the user-facing message.
    """
    if connected == "true":
        return transition(WorkflowStatus.IDLE, WorkflowEvent.CONNECT), None
    if error:
        return transition(WorkflowStatus.IDLE, WorkflowEvent.FAIL), error_message(error)
    return WorkflowStatus.IDLE, None
