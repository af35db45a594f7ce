"""Invariant conformance tests.

Checks every rule in ``STATE_RULES`` against known-good states reached
through real key presses and against hand-built broken states.
"""

from __future__ import annotations

import pytest

from calculator import INITIAL_STATE, CalculatorState, Operator
from invariants import STATE_RULES, Rule, validate_state


def _failed_ids(state: CalculatorState) -> set[str]:
    return {r.rule_id for r in validate_state(state).failures}


class TestAllRulesPassForReachableStates:

    def test_initial_state_passes(self):
        report = validate_state(INITIAL_STATE)
        assert report.passed, report.summary()

    @pytest.mark.parametrize("labels", [
        ("7", "+", "3", "×", "2", "="),
        ("5", "+", "×"),
        ("5", "+", "="),
        ("1", ".", "5", "+/-", "%"),
        ("0", "÷", "0", "="),
        ("2", "+", "3", "=", "=", "−"),
    ])
    def test_reachable_state_passes(self, press, labels):
        report = validate_state(press(*labels))
        assert report.passed, report.summary()


class TestRulesCatchBrokenStates:

    def test_empty_display(self):
        assert "CALC-DISPLAY" in _failed_ids(CalculatorState(display_value=""))

    def test_two_decimal_points(self):
        assert "CALC-DECIMAL" in _failed_ids(CalculatorState(display_value="1.2.3"))

    def test_consecutive_operators(self):
        state = CalculatorState(
            trail=("5", "+", "×"), previous_value=5.0, operator=Operator.MULTIPLY,
        )
        assert "CALC-TRAIL" in _failed_ids(state)

    def test_trail_starting_with_operator(self):
        assert "CALC-TRAIL" in _failed_ids(CalculatorState(trail=("+",)))

    def test_equals_in_the_middle(self):
        state = CalculatorState(trail=("5", "=", "3", "+"), previous_value=5.0,
                                operator=Operator.ADD)
        assert "CALC-EQUALS-LAST" in _failed_ids(state)

    def test_pending_equals(self):
        state = CalculatorState(trail=("5", "="), previous_value=5.0,
                                operator=Operator.EQUALS)
        assert "CALC-PENDING" in _failed_ids(state)

    def test_pending_without_accumulator(self):
        state = CalculatorState(trail=("5", "+"), operator=Operator.ADD)
        assert "CALC-PENDING" in _failed_ids(state)

    def test_pending_not_last_in_trail(self):
        state = CalculatorState(trail=("5", "×"), previous_value=5.0,
                                operator=Operator.ADD)
        assert "CALC-PENDING" in _failed_ids(state)


class TestReport:

    def test_rule_ids_unique(self):
        ids = [r.id for r in STATE_RULES]
        assert len(ids) == len(set(ids))

    def test_summary_lists_failures(self):
        report = validate_state(CalculatorState(display_value="1.2.3"))
        assert not report.passed
        assert "[CALC-DECIMAL]" in report.summary()

    def test_summary_when_passing(self):
        assert validate_state(INITIAL_STATE).summary() == (
            f"All {len(STATE_RULES)} rules passed"
        )

    def test_raising_rule_counts_as_failure(self, monkeypatch):
        def boom(state):
            raise RuntimeError("boom")

        monkeypatch.setattr(
            "invariants.STATE_RULES",
            [Rule(id="X", name="boom", description="raises", check=boom)],
        )
        report = validate_state(INITIAL_STATE)
        assert not report.passed
        assert report.failures[0].rule_id == "X"
