"""A single calculator instance bound to its listeners.

The session is the only place a ``CalculatorState`` is replaced.  Views
subscribe to it and re-render from the state they are handed.
"""
from __future__ import annotations

import logging
import uuid
from typing import Callable

from calculator import INITIAL_STATE, CalculatorState, Clear, Event, reduce
from formatting import format_display
from keypad import key_for_name

logger = logging.getLogger(__name__)

Listener = Callable[[CalculatorState], None]


def _new_id() -> str:
    return uuid.uuid4().hex


class CalculatorSession:
    """Holds the current state of one calculator."""

    def __init__(
        self,
        session_id: str | None = None,
        state: CalculatorState = INITIAL_STATE,
    ) -> None:
        self.id = session_id or _new_id()
        self._state = state
        self._listeners: list[Listener] = []

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def display(self) -> str:
        return format_display(self._state.display_value)

    @property
    def expression(self) -> str:
        return self._state.expression

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event) -> CalculatorState:
        """Apply one event and notify listeners if the state changed."""
        previous = self._state
        self._state = reduce(previous, event)
        logger.debug(
            "session %s: %r -> display=%r operator=%s",
            self.id,
            event,
            self._state.display_value,
            self._state.operator.value if self._state.operator else None,
        )
        if self._state != previous:
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    def press(self, key_name: str) -> CalculatorState:
        """Dispatch the event bound to the keypad key ``key_name``."""
        return self.dispatch(key_for_name(key_name).event)

    def reset(self) -> CalculatorState:
        return self.dispatch(Clear())
