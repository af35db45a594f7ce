"""Chained-operation calculator state machine.

Every keypad press is an event.  ``reduce(state, event)`` is a pure function
that returns the next state; nothing here holds mutable state.  Operations
are evaluated strictly left to right as operators are pressed, so
``7 + 3 × 2 =`` is ``(7 + 3) × 2``.

Layers
------
Operator          the four binary operators plus ``=``
CalculatorState   immutable snapshot of the five state fields
Digit ... Clear   tagged input events
calculate()       binary operation semantics
input_digit() ... one transition function per event kind
reduce()          single dispatch entry point
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from formatting import format_display, is_error, parse_number, stringify

MAX_ENTRY_LENGTH = 15


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "−"
    MULTIPLY = "×"
    DIVIDE = "÷"
    EQUALS = "="


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CalculatorState:
    """Snapshot of the calculator.

    ``trail`` holds the expression tokens; ``expression`` joins them for
    display.
    """

    display_value: str = "0"
    trail: tuple[str, ...] = ()
    previous_value: float | None = None
    operator: Operator | None = None
    waiting_for_operand: bool = True

    @property
    def expression(self) -> str:
        return " ".join(self.trail)

    @property
    def in_error(self) -> bool:
        return is_error(self.display_value)


INITIAL_STATE = CalculatorState()


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Digit:
    digit: str

    def __post_init__(self) -> None:
        if len(self.digit) != 1 or self.digit not in "0123456789":
            raise ValueError(f"digit must be one of '0'-'9', got {self.digit!r}")


@dataclass(frozen=True)
class DecimalPoint:
    pass


@dataclass(frozen=True)
class ToggleSign:
    pass


@dataclass(frozen=True)
class Percent:
    pass


@dataclass(frozen=True)
class Press:
    """An operator key, ``=`` included."""

    operator: Operator

    def __post_init__(self) -> None:
        # Operator(...) raises ValueError for unknown symbols.
        object.__setattr__(self, "operator", Operator(self.operator))


@dataclass(frozen=True)
class Clear:
    pass


Event = Union[Digit, DecimalPoint, ToggleSign, Percent, Press, Clear]


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        # IEEE 754: x/0 is a signed infinity, 0/0 is NaN.
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def calculate(a: float, b: float, op: Operator | None) -> float:
    """Apply ``op`` to ``(a, b)``.

    Non-finite results are returned as-is; the display renders them as
    ``"Error"``.  An unknown operator yields ``b``.
    """
    if op == Operator.ADD:
        return a + b
    if op == Operator.SUBTRACT:
        return a - b
    if op == Operator.MULTIPLY:
        return a * b
    if op == Operator.DIVIDE:
        return _divide(a, b)
    return b


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def input_digit(state: CalculatorState, digit: str) -> CalculatorState:
    if state.in_error:
        state = INITIAL_STATE

    if state.waiting_for_operand:
        # A digit after "=" starts a new calculation.
        if state.operator is None:
            state = INITIAL_STATE
        return replace(state, display_value=digit, waiting_for_operand=False)

    if len(state.display_value) > MAX_ENTRY_LENGTH:
        return state
    if state.display_value == "0":
        return replace(state, display_value=digit)
    return replace(state, display_value=state.display_value + digit)


def input_decimal_point(state: CalculatorState) -> CalculatorState:
    if state.in_error:
        return state

    if state.waiting_for_operand:
        if state.operator is None:
            state = INITIAL_STATE
        return replace(state, display_value="0.", waiting_for_operand=False)

    if "." in state.display_value:
        return state
    return replace(state, display_value=state.display_value + ".")


def toggle_sign(state: CalculatorState) -> CalculatorState:
    if state.in_error or state.display_value == "0":
        return state
    value = parse_number(state.display_value)
    if value is None:
        return state
    return replace(state, display_value=stringify(value * -1))


def apply_percent(state: CalculatorState) -> CalculatorState:
    if state.in_error:
        return state
    value = parse_number(state.display_value)
    if value is None:
        return state
    return replace(
        state,
        display_value=stringify(value / 100),
        waiting_for_operand=True,
    )


def _replace_pending(state: CalculatorState, op: Operator) -> CalculatorState:
    """Swap the pending operator without consuming an operand."""
    trail = state.trail[:-1] + (op.value,)
    if op == Operator.EQUALS:
        return replace(state, trail=trail, operator=None)
    return replace(state, trail=trail, operator=op)


def press_operator(state: CalculatorState, op: Operator) -> CalculatorState:
    current = parse_number(state.display_value)
    if current is None:
        return state

    if state.operator is not None and state.waiting_for_operand:
        return _replace_pending(state, op)

    operand = format_display(state.display_value)
    if Operator.EQUALS.value in state.trail:
        trail: tuple[str, ...] = (operand, op.value)
    else:
        trail = state.trail + (operand, op.value)

    display_value = state.display_value
    if state.operator is None:
        previous = current
    else:
        previous = calculate(state.previous_value, current, state.operator)
        display_value = stringify(previous)

    return CalculatorState(
        display_value=display_value,
        trail=trail,
        previous_value=previous,
        operator=None if op == Operator.EQUALS else op,
        waiting_for_operand=True,
    )


def clear(state: CalculatorState) -> CalculatorState:
    return INITIAL_STATE


def reduce(state: CalculatorState, event: Event) -> CalculatorState:
    """Return the state that follows ``event``."""
    if isinstance(event, Digit):
        return input_digit(state, event.digit)
    if isinstance(event, DecimalPoint):
        return input_decimal_point(state)
    if isinstance(event, ToggleSign):
        return toggle_sign(state)
    if isinstance(event, Percent):
        return apply_percent(state)
    if isinstance(event, Press):
        return press_operator(state, event.operator)
    if isinstance(event, Clear):
        return clear(state)
    raise TypeError(f"unsupported event: {event!r}")


def run(events, state: CalculatorState = INITIAL_STATE) -> CalculatorState:
    """Fold a sequence of events into a state."""
    for event in events:
        state = reduce(state, event)
    return state
