"""Calendar router — convert between puzzle day numbers and dates.

The site picks puzzles by calendar date while the store keys them by day
number; this endpoint does the conversion in either direction.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from integralforme.api.deps import get_settings
from integralforme.shared.config import Settings
from integralforme.shared.services.day_calendar import (
    date_for_day,
    day_for_date,
    format_display,
    parse_iso_date,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


@router.get("")
def get_calendar_day(
    day: Optional[str] = Query(None, description="Puzzle day number", examples=["108"]),
    date: Optional[str] = Query(
        None,
        description="Calendar date in YYYY-MM-DD format; takes precedence over day",
        examples=["2025-12-31"],
    ),
    settings: Settings = Depends(get_settings),
):
    """Return the day number together with its ISO and display dates.

    With neither parameter, describes the default day.
    """
    if date:
        parsed = parse_iso_date(date)
        if parsed is None:
            return JSONResponse(status_code=400, content={"error": "date must be YYYY-MM-DD"})
        day_number = day_for_date(parsed)
    else:
        try:
            day_number = int(day) if day else settings.default_day
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "day must be an integer"})

    try:
        value = date_for_day(day_number)
    except OverflowError:
        return JSONResponse(status_code=400, content={"error": "day is out of range"})

    return {
        "day": day_number,
        "date": value.isoformat(),
        "displayDate": format_display(value),
    }
