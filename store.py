"""In-memory calculator session store.

All state transitions go through the store, which validates the invariants
of every state it commits and serializes writes per session.
"""

from __future__ import annotations

import logging
import threading

from calculator import Event
from invariants import ValidationReport, validate_state
from session import CalculatorSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class StateInvariantError(Exception):
    """Raised when a transition produces a state that breaks an invariant."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        super().__init__(report.summary())


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, CalculatorSession] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    # -- helpers -------------------------------------------------------------

    def _validate_or_raise(self, session: CalculatorSession) -> None:
        report = validate_state(session.state)
        if not report.passed:
            logger.error("session %s broke invariants:\n%s", session.id, report.summary())
            raise StateInvariantError(report)

    # -- CRUD ----------------------------------------------------------------

    def create(self) -> CalculatorSession:
        """Create a session in the initial state."""
        session = CalculatorSession()
        with self._guard:
            self._sessions[session.id] = session
            self._locks[session.id] = threading.Lock()
        logger.info("created session %s", session.id)
        return session

    def get(self, session_id: str) -> CalculatorSession:
        """Retrieve a session by id."""
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list(self, *, offset: int = 0, limit: int = 50) -> list[CalculatorSession]:
        items = list(self._sessions.values())
        return items[offset : offset + limit]

    def dispatch(self, session_id: str, event: Event) -> CalculatorSession:
        """Apply an event to a session and return the session."""
        session = self.get(session_id)
        with self._locks[session_id]:
            session.dispatch(event)
            self._validate_or_raise(session)
        return session

    def press(self, session_id: str, key_name: str) -> CalculatorSession:
        """Apply the event bound to a keypad key."""
        session = self.get(session_id)
        with self._locks[session_id]:
            session.press(key_name)
            self._validate_or_raise(session)
        return session

    def delete(self, session_id: str) -> CalculatorSession:
        """Delete a session and return the deleted record."""
        with self._guard:
            session = self.get(session_id)
            del self._sessions[session_id]
            del self._locks[session_id]
        logger.info("deleted session %s", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        with self._guard:
            self._sessions.clear()
            self._locks.clear()
