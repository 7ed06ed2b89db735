"""
Cell coercion: turns one raw openpyxl cell value into a display string.

The result never contains a line break, so it is always safe to place
inside a TSV row.
"""

from __future__ import annotations

import datetime
import math
from decimal import Decimal
from typing import Any


def _format_number(value: float | Decimal) -> str:
    """Positional rendering of a number; never scientific notation."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return str(value)
        # 15 significant digits, as a spreadsheet displays a double
        value = Decimal(format(value, ".15g"))
    if not value.is_finite():
        return str(value)
    if value.is_zero():
        return "0"
    if value == value.to_integral_value():
        value = value.to_integral_value()
    return format(value, "f")


def _format_datetime(value: datetime.datetime) -> str:
    if value.time() == datetime.time(0, 0):
        return value.date().isoformat()
    return value.isoformat()


def coerce_cell_value(value: Any) -> str:
    """Return the display string for a raw cell value (``None`` → ``""``)."""
    if value is None:
        return ""

    if isinstance(value, str):
        text = value
    elif isinstance(value, bool):
        text = "TRUE" if value else "FALSE"
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, (float, Decimal)):
        text = _format_number(value)
    elif isinstance(value, datetime.datetime):
        text = _format_datetime(value)
    elif isinstance(value, (datetime.date, datetime.time)):
        text = value.isoformat()
    else:
        text = str(value)

    return text.replace("\r", " ").replace("\n", " ")
