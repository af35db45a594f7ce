"""State invariants for the calculator.

Defines what every reachable ``CalculatorState`` must satisfy.  Each rule is
a callable predicate, so the rules double as conformance checks in the test
suite and in the sequence search (see ``validation/sequence_search.py``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from calculator import CalculatorState, Operator

_OPERATOR_TOKENS = frozenset(op.value for op in Operator)


# ---------------------------------------------------------------------------
# Rule: a named, executable predicate over a state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rule:
    """A named validation rule for calculator states."""

    id: str
    name: str
    description: str
    check: Callable[[CalculatorState], bool]


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

def _display_not_empty(s: CalculatorState) -> bool:
    return bool(s.display_value)


def _single_decimal_point(s: CalculatorState) -> bool:
    return s.display_value.count(".") <= 1


def _trail_alternates(s: CalculatorState) -> bool:
    """Operands sit at even positions, operators at odd ones."""
    for i, token in enumerate(s.trail):
        is_operator = token in _OPERATOR_TOKENS
        if is_operator != (i % 2 == 1):
            return False
    return True


def _equals_only_last(s: CalculatorState) -> bool:
    return Operator.EQUALS.value not in s.trail[:-1]


def _pending_operator_consistent(s: CalculatorState) -> bool:
    if s.operator is None:
        return True
    return (
        s.operator != Operator.EQUALS
        and s.previous_value is not None
        and bool(s.trail)
        and s.trail[-1] == s.operator.value
    )


# ---------------------------------------------------------------------------
# All rules
# ---------------------------------------------------------------------------

STATE_RULES: list[Rule] = [
    Rule(
        id="CALC-DISPLAY",
        name="display_not_empty",
        description="The raw display value must never be empty",
        check=_display_not_empty,
    ),
    Rule(
        id="CALC-DECIMAL",
        name="single_decimal_point",
        description="The raw display value holds at most one decimal point",
        check=_single_decimal_point,
    ),
    Rule(
        id="CALC-TRAIL",
        name="trail_alternates",
        description=(
            "The expression trail alternates operand and operator tokens, "
            "starting with an operand"
        ),
        check=_trail_alternates,
    ),
    Rule(
        id="CALC-EQUALS-LAST",
        name="equals_only_last",
        description="'=' may only appear as the final trail token",
        check=_equals_only_last,
    ),
    Rule(
        id="CALC-PENDING",
        name="pending_operator_consistent",
        description=(
            "A pending operator is never '=', has an accumulator, and is the "
            "last trail token"
        ),
        check=_pending_operator_consistent,
    ),
]


@dataclass(frozen=True)
class ValidationResult:
    rule_id: str
    rule_name: str
    passed: bool
    description: str


@dataclass(frozen=True)
class ValidationReport:
    results: list[ValidationResult]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[ValidationResult]:
        return [r for r in self.results if not r.passed]

    def summary(self) -> str:
        total = len(self.results)
        failed = len(self.failures)
        if failed == 0:
            return f"All {total} rules passed"
        lines = [f"{failed}/{total} rules failed:"]
        for f in self.failures:
            lines.append(f"  [{f.rule_id}] {f.rule_name}: {f.description}")
        return "\n".join(lines)


def validate_state(state: CalculatorState) -> ValidationReport:
    """Run every rule against a state and return a report."""
    results = []
    for rule in STATE_RULES:
        try:
            passed = rule.check(state)
        except Exception:
            passed = False
        results.append(
            ValidationResult(
                rule_id=rule.id,
                rule_name=rule.name,
                passed=passed,
                description=rule.description,
            )
        )
    return ValidationReport(results=results)
