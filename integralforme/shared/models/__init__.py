"""Models package — re-exports for convenience."""

from integralforme.shared.models.puzzle import (
    LIMIT_DIFFICULTY,
    TIER_DIFFICULTIES,
    PuzzleData,
    PuzzleQuery,
    PuzzleRecord,
    PuzzleType,
    TierResult,
    TranslateResponse,
)

__all__ = [
    "LIMIT_DIFFICULTY",
    "TIER_DIFFICULTIES",
    "PuzzleData",
    "PuzzleQuery",
    "PuzzleRecord",
    "PuzzleType",
    "TierResult",
    "TranslateResponse",
]
