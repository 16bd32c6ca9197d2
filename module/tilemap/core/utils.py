"""Shared utilities.

``esc()`` HTML-escapes any data-supplied string before it goes into text
nodes or attribute values. ``round_half_up()`` and ``format_number()`` give
the display rounding used by tooltips (half-up, not banker's rounding).
"""

from __future__ import annotations

import html
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def esc(value: Any) -> str:
    """Return an HTML-escaped string representation of *value*.

    Escapes ``&``, ``<``, ``>``, and both single and double quotes so the
    result is safe for element text or attribute values.
    """
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round *value* to *decimals* places, halves away from zero."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float, decimals: int = 1) -> str:
    """Format with thousands separators: 1234.56 -> '1,234.6'."""
    return f"{round_half_up(value, decimals):,.{decimals}f}"
