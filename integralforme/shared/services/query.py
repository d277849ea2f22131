"""Daily puzzle query validation and upstream URL construction.

Both halves are pure: ``validate_query`` turns raw request strings into a
``PuzzleQuery``; ``build_daily_url`` turns a ``PuzzleQuery`` into a PostgREST
read URL against the puzzle store.
"""

import math
import re
from typing import Optional, Union
from urllib.parse import urlencode

from integralforme.shared.errors import QueryValidationError
from integralforme.shared.models.puzzle import (
    LIMIT_DIFFICULTY,
    TIER_DIFFICULTIES,
    PuzzleQuery,
    PuzzleType,
)

DEFAULT_DAY = 108
SELECT_COLUMNS = "day,difficulty,puzzle_data"

RESOURCES = {
    PuzzleType.DERIVATIVES: "daily_derivatives",
    PuzzleType.INTEGRALS: "daily_integrals",
    PuzzleType.LIMITS: "daily_limits",
}

_SCHEME = re.compile(r"^https?://")

Day = Union[int, float]


# ─────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────

def parse_type(raw: Optional[str]) -> PuzzleType:
    try:
        return PuzzleType(raw or "")
    except ValueError:
        raise QueryValidationError("type must be derivatives, integrals, or limits") from None


def parse_day(raw: Optional[str], default: int = DEFAULT_DAY) -> Day:
    """Parse a day number; empty or missing means ``default``.

    Integral values come back as ``int`` so they render as ``108``, not
    ``108.0``. NaN and infinities are rejected.
    """
    text = raw if raw else str(default)
    if "_" in text:
        raise QueryValidationError("day must be a number")
    try:
        value = float(text)
    except ValueError:
        raise QueryValidationError("day must be a number") from None

    if not math.isfinite(value):
        raise QueryValidationError("day must be a number")
    return int(value) if value.is_integer() else value


def parse_difficulty(puzzle_type: PuzzleType, raw: Optional[str]) -> str:
    difficulty = (raw or "").upper()

    if puzzle_type is PuzzleType.LIMITS:
        if difficulty and difficulty != LIMIT_DIFFICULTY:
            raise QueryValidationError("difficulty for limits must be LIMIT")
        return LIMIT_DIFFICULTY

    if difficulty not in TIER_DIFFICULTIES:
        raise QueryValidationError("difficulty must be EASY, MEDIUM, or HARD")
    return difficulty


def validate_query(
    type: Optional[str],
    difficulty: Optional[str],
    day: Optional[str],
    default_day: int = DEFAULT_DAY,
) -> PuzzleQuery:
    """Validate and normalize raw query parameters.

    Checks run in order type, day, difficulty; the first failure raises
    ``QueryValidationError`` with a message fit for the caller.
    """
    puzzle_type = parse_type(type)
    parsed_day = parse_day(day, default=default_day)
    normalized = parse_difficulty(puzzle_type, difficulty)
    return PuzzleQuery(type=puzzle_type, difficulty=normalized, day=parsed_day)


# ─────────────────────────────────────────────
# Upstream URL
# ─────────────────────────────────────────────

def resource_for(puzzle_type: PuzzleType) -> str:
    return RESOURCES[PuzzleType(puzzle_type)]


def normalize_host(host: str) -> str:
    """Strip any scheme and trailing slash; we always build https URLs."""
    return _SCHEME.sub("", host.strip()).rstrip("/")


def format_day(day: Day) -> str:
    if isinstance(day, float) and day.is_integer():
        return str(int(day))
    return str(day)


def build_daily_url(query: PuzzleQuery, host: str) -> str:
    """PostgREST read URL: equality filters on difficulty and day."""
    params = {
        "select": SELECT_COLUMNS,
        "difficulty": f"eq.{query.difficulty}",
        "day": f"eq.{format_day(query.day)}",
    }
    return f"https://{normalize_host(host)}/rest/v1/{resource_for(query.type)}?{urlencode(params)}"
