"""Key-sequence search -- discovers states that break the invariants.

This module runs independently of the test suite.  Starting from the
initial state it presses every keypad key, breadth first, up to a depth
limit, and records:

1. Invariant violations: reachable states that fail a rule in
   ``invariants.STATE_RULES``.
2. Crashes: key presses for which the reducer or the formatter raises.

Identical states are only expanded once, so the search covers every
distinct state reachable within the depth limit.

Run directly::

    python -m validation.sequence_search [depth]
"""
from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass, field

sys.path.insert(0, ".")

from calculator import INITIAL_STATE, CalculatorState, reduce
from formatting import format_display
from invariants import validate_state
from keypad import KEYS

DEFAULT_DEPTH = 4


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    keys: tuple[str, ...]
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    states_visited: int = 0
    presses: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Key Sequence Search Report",
            "=" * 40,
            f"Distinct states: {self.states_visited}",
            f"Key presses:     {self.presses}",
            f"Counterexamples: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category}")
                lines.append(f"      Keys:   {' '.join(cx.keys)}")
                lines.append(f"      Actual: {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def _state_key(state: CalculatorState) -> tuple:
    # NaN never compares equal to itself; key on its text instead.
    return (
        state.display_value,
        state.trail,
        repr(state.previous_value),
        state.operator,
        state.waiting_for_operand,
    )


def run_search(depth: int = DEFAULT_DEPTH) -> SearchReport:
    """Explore every state reachable in at most ``depth`` key presses."""
    report = SearchReport()
    seen = {_state_key(INITIAL_STATE)}
    queue: deque[tuple[CalculatorState, tuple[str, ...]]] = deque(
        [(INITIAL_STATE, ())]
    )

    while queue:
        state, keys = queue.popleft()
        report.states_visited += 1
        if len(keys) >= depth:
            continue

        for key in KEYS:
            path = keys + (key.label,)
            report.presses += 1
            try:
                nxt = reduce(state, key.event)
                format_display(nxt.display_value)
            except Exception as e:
                report.counterexamples.append(Counterexample(
                    category="crash",
                    keys=path,
                    actual=f"{type(e).__name__}: {e}",
                    description="Key press raised an exception",
                ))
                continue

            validation = validate_state(nxt)
            if not validation.passed:
                report.counterexamples.append(Counterexample(
                    category="invariant_violation",
                    keys=path,
                    actual=repr(nxt),
                    description=validation.summary(),
                ))
                continue

            key_of_next = _state_key(nxt)
            if key_of_next not in seen:
                seen.add(key_of_next)
                queue.append((nxt, path))

    return report


def main() -> None:
    depth = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_DEPTH
    print(f"Searching key sequences up to depth {depth} ...\n")
    report = run_search(depth)
    print(report.summary())
    if not report.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
