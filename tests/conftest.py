"""Shared fixtures for calculator tests."""

from __future__ import annotations

from typing import Callable

import pytest

from calculator import INITIAL_STATE, CalculatorState, reduce
from keypad import key_for_label
from session import CalculatorSession
from store import SessionStore


def _press(*labels: str, state: CalculatorState = INITIAL_STATE) -> CalculatorState:
    for label in labels:
        state = reduce(state, key_for_label(label).event)
    return state


@pytest.fixture
def press() -> Callable[..., CalculatorState]:
    """Fold keypad labels into a state: ``press("7", "+", "3", "=")``."""
    return _press


@pytest.fixture
def session() -> CalculatorSession:
    return CalculatorSession()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()
