"""In-memory session storage."""

import threading
from datetime import datetime

from sessionkeeper.core.modules.session.models import AuthToken, Session


class SessionStore:
    """Thread-safe token -> session mapping.

    All writes go through the store's lock. Renewals use compare_and_set so a
    read-modify-write on one token can never overwrite a concurrent update.
    """

    def __init__(self) -> None:
        self._sessions: dict[AuthToken, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, token: AuthToken) -> Session | None:
        with self._lock:
            return self._sessions.get(token)

    def insert(self, session: Session) -> bool:
        """Store a new session. Returns False if the token is already taken."""
        with self._lock:
            if session.token in self._sessions:
                return False
            self._sessions[session.token] = session
            return True

    def compare_and_set(self, expected: Session, new: Session) -> bool:
        """Replace expected with new only if expected is still the stored record."""
        if expected.token != new.token:
            raise ValueError("compare_and_set cannot change the session token")
        with self._lock:
            if self._sessions.get(expected.token) is not expected:
                return False
            self._sessions[new.token] = new
            return True

    def delete(self, token: AuthToken) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def remove_expired(self, cutoff: datetime) -> int:
        """Remove every session that expired before cutoff and return how many were removed."""
        with self._lock:
            stale = [token for token, session in self._sessions.items() if session.expires_at < cutoff]
            for token in stale:
                del self._sessions[token]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
