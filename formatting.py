"""Number text handling for the calculator display.

The state machine keeps every value as raw, unformatted text so that entry
can continue character by character.  This module converts between that raw
text and floats, and renders the raw text into what the display shows.

Layers
------
stringify        float -> raw text (shortest round-trip, no trailing ``.0``)
parse_number     raw text -> float, reading the longest numeric prefix
group_thousands  float -> ``en-US`` grouped text
format_display   raw text -> display text (``"Error"`` for non-finite values)
"""
from __future__ import annotations

import math
import re
from decimal import Decimal

MAX_FRACTION_DIGITS = 20

ERROR_TEXT = "Error"

# Markers a raw display value can carry once arithmetic leaves the finite range.
ERROR_MARKERS = (ERROR_TEXT, "Infinity", "NaN")

_NUMERIC_PREFIX = re.compile(
    r"\s*[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def is_error(raw: str) -> bool:
    """True when the raw value carries an error or non-finite marker."""
    return any(marker in raw for marker in ERROR_MARKERS)


def stringify(value: float) -> str:
    """Render a float the way the display stores it.

    Uses the shortest digit string that round-trips, laid out like
    ``Number#toString``: plain notation for exponents in ``[-7, 21)``,
    exponent notation (``1e+21``, ``1e-7``) outside that window.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    prefix = "-" if sign else ""
    k = len(digits)
    n = k + exponent  # position of the decimal point relative to the digits

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * -n + digits

    e = n - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{prefix}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def parse_number(text: str) -> float | None:
    """Parse the leading numeric prefix of ``text``.

    Trailing garbage is ignored (``"12."`` is 12).  Returns ``None`` when
    there is no numeric prefix or the value is not finite.
    """
    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return None
    value = float(match.group().strip())
    if not math.isfinite(value):
        return None
    return value


def group_thousands(value: float) -> str:
    """``en-US`` grouping, keeping at most MAX_FRACTION_DIGITS fraction digits."""
    number = Decimal(repr(value))
    if number == number.to_integral_value():
        return format(number, ",.0f")
    if -number.as_tuple().exponent > MAX_FRACTION_DIGITS:
        grouped = format(number, f",.{MAX_FRACTION_DIGITS}f")
        return grouped.rstrip("0").rstrip(".")
    return format(number, ",f")


def format_display(raw: str) -> str:
    """Render a raw display value for the screen.

    Only the integer part is grouped.  The fractional part is reattached
    verbatim, including a bare trailing point so that ``"12."`` shows while
    the user is still typing.
    """
    if not raw or is_error(raw):
        return ERROR_TEXT

    integer, point, fraction = raw.partition(".")
    if not integer and point:
        return f"0.{fraction}"

    value = parse_number(integer)
    if value is None:
        return "0"

    grouped = group_thousands(value)
    return f"{grouped}.{fraction}" if point else grouped
