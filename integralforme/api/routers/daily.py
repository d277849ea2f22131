"""Daily router — one puzzle tier, or every tier of a day at once.

Upstream failures pass through: the store's status code and raw body are
returned unchanged so the client sees exactly what Supabase said.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from integralforme.api.deps import get_gateway, get_settings
from integralforme.shared.config import Settings
from integralforme.shared.errors import (
    QueryValidationError,
    UpstreamHTTPError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from integralforme.shared.services.day_calendar import describe_day
from integralforme.shared.services.gateway import DailyPuzzleGateway
from integralforme.shared.services.query import parse_day, validate_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/daily", tags=["Daily"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
def get_daily(
    puzzle_type: Optional[str] = Query(
        None,
        alias="type",
        description="derivatives, integrals or limits",
        examples=["integrals"],
    ),
    difficulty: Optional[str] = Query(
        None,
        description="EASY, MEDIUM or HARD (case-insensitive); LIMIT or empty for limits",
    ),
    day: Optional[str] = Query(None, description="Puzzle day number, defaults to 108"),
    gateway: DailyPuzzleGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    """Return the store rows for one (type, difficulty, day).

    An empty array means the day has no puzzle for that tier. It is not an
    error.
    """
    try:
        query = validate_query(puzzle_type, difficulty, day, default_day=settings.default_day)
    except QueryValidationError as exc:
        logger.debug("Rejected daily query: %s", exc.message)
        return _error(400, exc.message)

    try:
        return gateway.fetch_daily(query)
    except UpstreamHTTPError as exc:
        return Response(
            content=exc.body,
            status_code=exc.status_code,
            media_type=exc.content_type or "text/plain",
        )
    except UpstreamTransportError:
        return _error(502, "Puzzle store unreachable")
    except UpstreamProtocolError as exc:
        return _error(502, f"Invalid puzzle store response: {exc.message}")


@router.get("/overview")
def get_daily_overview(
    day: Optional[str] = Query(None, description="Puzzle day number, defaults to 108"),
    gateway: DailyPuzzleGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    """Every tier of a day, fetched concurrently.

    Each tier reports ``ok``, ``not_found`` or ``error`` on its own; a failing
    tier does not fail the response.
    """
    try:
        parsed_day = parse_day(day, default=settings.default_day)
    except QueryValidationError as exc:
        return _error(400, exc.message)

    tiers = gateway.fetch_tiers(parsed_day)
    return {
        "day": parsed_day,
        **describe_day(parsed_day),
        "tiers": [tier.model_dump(mode="json", by_alias=True) for tier in tiers],
    }
