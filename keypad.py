"""Keypad layout and display rendering.

The presentation layer holds no logic of its own: a key maps to an event,
and the display is rendered from whatever state the session hands over.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from calculator import (
    CalculatorState,
    Clear,
    DecimalPoint,
    Digit,
    Event,
    Operator,
    Percent,
    Press,
    ToggleSign,
)
from formatting import format_display

COMPACT_DISPLAY_LENGTH = 9
COLUMNS = 4


class KeyRole(str, Enum):
    FUNCTION = "function"
    DIGIT = "digit"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Key:
    """One keypad button.

    ``name`` is URL-safe and stable; ``label`` is what the button shows.
    """

    name: str
    label: str
    role: KeyRole
    event: Event
    span: int = 1


class UnknownKeyError(KeyError):
    """Raised when a key name or label is not on the keypad."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown key: {key}")


def _digit(d: str, span: int = 1) -> Key:
    return Key(name=d, label=d, role=KeyRole.DIGIT, event=Digit(d), span=span)


def _operator(name: str, op: Operator) -> Key:
    return Key(name=name, label=op.value, role=KeyRole.OPERATOR, event=Press(op))


KEYPAD: list[list[Key]] = [
    [
        Key("clear", "AC", KeyRole.FUNCTION, Clear()),
        Key("toggle-sign", "+/-", KeyRole.FUNCTION, ToggleSign()),
        Key("percent", "%", KeyRole.FUNCTION, Percent()),
        _operator("divide", Operator.DIVIDE),
    ],
    [_digit("7"), _digit("8"), _digit("9"), _operator("multiply", Operator.MULTIPLY)],
    [_digit("4"), _digit("5"), _digit("6"), _operator("subtract", Operator.SUBTRACT)],
    [_digit("1"), _digit("2"), _digit("3"), _operator("add", Operator.ADD)],
    [
        _digit("0", span=2),
        Key("decimal", ".", KeyRole.DIGIT, DecimalPoint()),
        _operator("equals", Operator.EQUALS),
    ],
]

KEYS: list[Key] = [key for row in KEYPAD for key in row]

_BY_NAME = {key.name: key for key in KEYS}
_BY_LABEL = {key.label: key for key in KEYS}


def key_for_name(name: str) -> Key:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownKeyError(name) from None


def key_for_label(label: str) -> Key:
    try:
        return _BY_LABEL[label]
    except KeyError:
        raise UnknownKeyError(label) from None


@dataclass(frozen=True)
class DisplayView:
    """The two strings the display shows, plus the font-size hint."""

    display: str
    expression: str
    compact: bool


def render(state: CalculatorState) -> DisplayView:
    return DisplayView(
        display=format_display(state.display_value),
        expression=state.expression,
        compact=len(state.display_value) > COMPACT_DISPLAY_LENGTH,
    )
