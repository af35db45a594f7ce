"""Request and response models for the calculator API.

Events arrive as a tagged union discriminated by ``kind``; each payload
converts to the matching calculator event.  Responses carry the rendered
display alongside the raw state so clients can re-render verbatim.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

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
from formatting import stringify
from keypad import COLUMNS, KEYPAD, KeyRole, render
from session import CalculatorSession


# ---------------------------------------------------------------------------
# Event payloads
# ---------------------------------------------------------------------------

class DigitEvent(BaseModel):
    kind: Literal["digit"] = "digit"
    digit: str = Field(..., pattern=r"^[0-9]$")

    def to_event(self) -> Event:
        return Digit(self.digit)


class DecimalEvent(BaseModel):
    kind: Literal["decimal"] = "decimal"

    def to_event(self) -> Event:
        return DecimalPoint()


class ToggleSignEvent(BaseModel):
    kind: Literal["toggle_sign"] = "toggle_sign"

    def to_event(self) -> Event:
        return ToggleSign()


class PercentEvent(BaseModel):
    kind: Literal["percent"] = "percent"

    def to_event(self) -> Event:
        return Percent()


class OperatorEvent(BaseModel):
    kind: Literal["operator"] = "operator"
    operator: Operator

    def to_event(self) -> Event:
        return Press(self.operator)


class ClearEvent(BaseModel):
    kind: Literal["clear"] = "clear"

    def to_event(self) -> Event:
        return Clear()


EventPayload = Annotated[
    Union[
        DigitEvent,
        DecimalEvent,
        ToggleSignEvent,
        PercentEvent,
        OperatorEvent,
        ClearEvent,
    ],
    Field(discriminator="kind"),
]


class EventRequest(BaseModel):
    event: EventPayload


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class StateModel(BaseModel):
    """Raw state fields, unformatted.

    ``previous_value`` is raw text as well, so non-finite accumulators
    survive JSON encoding.
    """

    display_value: str
    expression: str
    previous_value: str | None
    operator: Operator | None
    waiting_for_operand: bool

    @classmethod
    def from_state(cls, state: CalculatorState) -> StateModel:
        return cls(
            display_value=state.display_value,
            expression=state.expression,
            previous_value=(
                None if state.previous_value is None
                else stringify(state.previous_value)
            ),
            operator=state.operator,
            waiting_for_operand=state.waiting_for_operand,
        )


class SessionView(BaseModel):
    id: str
    display: str
    expression: str
    compact: bool
    state: StateModel

    @classmethod
    def from_session(cls, session: CalculatorSession) -> SessionView:
        view = render(session.state)
        return cls(
            id=session.id,
            display=view.display,
            expression=view.expression,
            compact=view.compact,
            state=StateModel.from_state(session.state),
        )


class SessionListResponse(BaseModel):
    items: list[SessionView]
    total: int


class KeyModel(BaseModel):
    name: str
    label: str
    role: KeyRole
    span: int


class KeypadResponse(BaseModel):
    columns: int
    rows: list[list[KeyModel]]

    @classmethod
    def default(cls) -> KeypadResponse:
        return cls(
            columns=COLUMNS,
            rows=[
                [
                    KeyModel(name=k.name, label=k.label, role=k.role, span=k.span)
                    for k in row
                ]
                for row in KEYPAD
            ],
        )
