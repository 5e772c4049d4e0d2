"""Connected-session storage.

Token bundles are kept server-side and looked up by the identifier carried
in the session cookie.
"""

from .store import SessionStore

__all__ = ["SessionStore"]
