from __future__ import annotations

from datetime import date

from src.core.errors import BadRequestError


def parse_iso_date(value: str) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp and keep only the date part."""
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise BadRequestError(f"Invalid date: {value}") from exc


def month_start(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)


def months_between(start: date, end: date) -> int:
    """Year-month difference, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def subtract_years(value: date, years: int) -> date:
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return value.replace(year=value.year - years, day=28)


def is_in_month(value: date, year: int, month: int) -> bool:
    return value.year == year and value.month == month

