"""Daily Puzzle Gateway — validated queries in, puzzle store rows out.

Talks to the Supabase REST endpoint with ``requests``. Upstream failures are
not retried or reshaped: a non-2xx answer becomes ``UpstreamHTTPError``
carrying the status and raw body so the HTTP layer can pass it through.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

import requests
from pydantic import ValidationError as PydanticValidationError

from integralforme.shared.errors import (
    UpstreamError,
    UpstreamHTTPError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from integralforme.shared.models.puzzle import (
    LIMIT_DIFFICULTY,
    TIER_DIFFICULTIES,
    PuzzleQuery,
    PuzzleRecord,
    PuzzleType,
    TierResult,
)
from integralforme.shared.services.query import (
    DEFAULT_DAY,
    Day,
    build_daily_url,
    format_day,
    validate_query,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

# Landing page tiers, in display order
ALL_TIERS: Tuple[Tuple[PuzzleType, str], ...] = (
    *((PuzzleType.DERIVATIVES, d) for d in TIER_DIFFICULTIES),
    *((PuzzleType.INTEGRALS, d) for d in TIER_DIFFICULTIES),
    (PuzzleType.LIMITS, LIMIT_DIFFICULTY),
)


class DailyPuzzleGateway:
    """Read-only client for the daily_* tables of the puzzle store.

    Args:
        host: Store hostname; a scheme prefix is tolerated and dropped.
        api_key: Anon key, or None to go out unauthenticated.
        session: ``requests.Session`` (or anything with the same ``get``).
        session_factory: Builds one session per fan-out leg, so concurrent legs
            never share a ``requests.Session``.
        timeout: Per-request timeout in seconds.
    """

    service_name = "puzzle store"

    def __init__(
        self,
        host: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.host = host
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.session_factory = session_factory

    def headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def fetch_daily(self, query: PuzzleQuery, session: Optional[requests.Session] = None) -> list:
        """GET the rows matching ``query``. An empty list means no puzzle."""
        url = build_daily_url(query, self.host)
        logger.info(
            "Fetching %s %s day=%s", query.type.value, query.difficulty, format_day(query.day)
        )

        try:
            response = (session or self.session).get(
                url, headers=self.headers(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.warning("Puzzle store unreachable: %s", exc)
            raise UpstreamTransportError(self.service_name, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Puzzle store returned %d for %s %s day=%s",
                response.status_code,
                query.type.value,
                query.difficulty,
                format_day(query.day),
            )
            raise UpstreamHTTPError(
                self.service_name,
                response.status_code,
                response.text,
                content_type=response.headers.get("Content-Type"),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamProtocolError(self.service_name, "response is not JSON") from exc

        if not isinstance(payload, list):
            raise UpstreamProtocolError(self.service_name, "expected a JSON array of rows")

        logger.info("Puzzle store returned %d row(s)", len(payload))
        return payload

    def fetch(
        self,
        type: Optional[str],
        difficulty: Optional[str] = None,
        day: Optional[str] = None,
        default_day: int = DEFAULT_DAY,
    ) -> list:
        """Validate raw parameters, then fetch."""
        return self.fetch_daily(validate_query(type, difficulty, day, default_day=default_day))

    # ── Fan-out over tiers ──

    def fetch_tier(
        self,
        day: Day,
        puzzle_type: PuzzleType,
        difficulty: str,
        session: Optional[requests.Session] = None,
    ) -> TierResult:
        """Fetch one tier, folding failures into the result instead of raising."""
        query = PuzzleQuery(type=puzzle_type, difficulty=difficulty, day=day)
        try:
            rows = self.fetch_daily(query, session=session)
        except UpstreamError as exc:
            return TierResult(type=puzzle_type, difficulty=difficulty, status="error", error=str(exc))

        if not rows:
            return TierResult(type=puzzle_type, difficulty=difficulty, status="not_found")

        try:
            record = PuzzleRecord.model_validate(rows[0])
        except PydanticValidationError:
            logger.warning("Malformed puzzle row for %s %s", puzzle_type.value, difficulty)
            return TierResult(
                type=puzzle_type,
                difficulty=difficulty,
                status="error",
                error="Invalid puzzle record",
            )
        return TierResult(type=puzzle_type, difficulty=difficulty, status="ok", puzzle=record)

    def _fetch_tier_on_own_session(
        self, day: Day, puzzle_type: PuzzleType, difficulty: str
    ) -> TierResult:
        with self.session_factory() as session:
            return self.fetch_tier(day, puzzle_type, difficulty, session=session)

    def fetch_tiers(
        self,
        day: Day,
        tiers: Sequence[Tuple[PuzzleType, str]] = ALL_TIERS,
    ) -> List[TierResult]:
        """Fetch every tier concurrently and wait for all of them.

        Legs are independent: one failing never cancels or changes another.
        Each leg opens and closes its own session. Results come back in
        ``tiers`` order.
        """
        tiers = list(tiers)
        if not tiers:
            return []

        with ThreadPoolExecutor(max_workers=len(tiers)) as pool:
            futures = [pool.submit(self._fetch_tier_on_own_session, day, t, d) for t, d in tiers]
            return [future.result() for future in futures]
