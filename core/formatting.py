"""
Label formatting for assembled tables and narrative text.

Only the assemblers and the breach sentence builder call into this module;
simulators work on raw floats.
"""

from __future__ import annotations

from core.utils import excel_round, is_finite_number


def format_percent(decimal: float, digits: int = 1) -> str:
    return f"{decimal * 100:.{digits}f}%"


def format_euro(amount: float, digits: int = 0) -> str:
    """Full euro amount with thousands separators, e.g. -€1,234.50."""
    value = float(amount) if is_finite_number(amount) else 0.0
    text = f"€{abs(value):,.{digits}f}"
    # a value that rounds to zero should not print as "-€0"
    if value < 0 and float(f"{abs(value):.{digits}f}") != 0:
        return f"-{text}"
    return text


def format_euro_compact(amount: float) -> str:
    """Millions shortened to one decimal (€2.2m); smaller amounts in whole euros."""
    if not is_finite_number(amount):
        return "€0"
    if abs(amount) >= 1_000_000:
        return f"€{amount / 1_000_000:.1f}m"
    return f"€{int(excel_round(amount, 0)):,}"
