from __future__ import annotations

from datetime import date
from typing import Optional

from src.shared.time import parse_iso_date


def format_currency(amount: float, symbol: str = "$") -> str:
    """Render an amount the way es-MX formats MXN: ``$1,234,567.89``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def days_since(value: date | str, today: Optional[date] = None) -> int:
    start = parse_iso_date(value) if isinstance(value, str) else value
    reference = today or date.today()
    return (reference - start).days
