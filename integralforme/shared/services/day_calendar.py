"""Puzzle day numbers ⇄ calendar dates.

Day 108 is 31 Dec 2025 (UTC); every day number after it is one calendar day
later.
"""

from datetime import date, datetime, timedelta
from typing import Optional

BASE_DAY = 108
BASE_DATE = date(2025, 12, 31)


def date_for_day(day: int) -> date:
    """Calendar date of a puzzle day. Raises OverflowError outside year 1..9999."""
    return BASE_DATE + timedelta(days=day - BASE_DAY)


def day_for_date(value: date) -> int:
    return BASE_DAY + (value - BASE_DATE).days


def parse_iso_date(text: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD``; anything else gives None."""
    if not text:
        return None
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def format_display(value: date) -> str:
    """DD/MM/YYYY, as the site shows dates."""
    return value.strftime("%d/%m/%Y")


def describe_day(day) -> dict:
    """Date fields for an API payload; nulls when the day has no calendar date."""
    if isinstance(day, bool) or not isinstance(day, int):
        return {"date": None, "displayDate": None}
    try:
        value = date_for_day(day)
    except OverflowError:
        return {"date": None, "displayDate": None}
    return {"date": value.isoformat(), "displayDate": format_display(value)}
