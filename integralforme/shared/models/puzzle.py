"""Pydantic models for daily puzzles.

The puzzle store owns the record shape; these models describe what we rely
on and keep anything else the store sends. Upstream keys are camelCase
(``answerPretty``), so Python code uses snake_case with serialization aliases,
and dumps go out ``by_alias=True``.
"""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

LIMIT_DIFFICULTY = "LIMIT"
TIER_DIFFICULTIES = ("EASY", "MEDIUM", "HARD")


class PuzzleType(str, Enum):
    """Puzzle families, one upstream table each."""

    DERIVATIVES = "derivatives"
    INTEGRALS = "integrals"
    LIMITS = "limits"


def difficulties_for(puzzle_type: PuzzleType) -> tuple:
    """Difficulty domain for a puzzle type."""
    if puzzle_type is PuzzleType.LIMITS:
        return (LIMIT_DIFFICULTY,)
    return TIER_DIFFICULTIES


class PuzzleQuery(BaseModel):
    """A validated daily puzzle lookup."""

    model_config = ConfigDict(frozen=True)

    type: PuzzleType
    difficulty: str = Field(..., description="LIMIT for limits, EASY/MEDIUM/HARD otherwise")
    day: Union[int, float] = Field(..., description="Puzzle day number; any finite number")

    @model_validator(mode="after")
    def _difficulty_matches_type(self) -> "PuzzleQuery":
        if self.difficulty not in difficulties_for(self.type):
            raise ValueError(
                f"difficulty {self.difficulty!r} is not valid for {self.type.value}"
            )
        return self


class PuzzleData(BaseModel):
    """The puzzle itself, as stored in the ``puzzle_data`` column."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    day: Union[int, float]
    slug: str
    title: str
    difficulty: str
    latex: str = Field(..., description="The expression to solve, in LaTeX")
    hints: List[str] = Field(default_factory=list)
    answer_pretty: Optional[str] = Field(default=None, alias="answerPretty")
    solution_markdown: Optional[str] = Field(
        default=None,
        alias="solutionMarkdown",
        description="Worked solution in Markdown; may embed math spans",
    )


class PuzzleRecord(BaseModel):
    """One row of a daily_* table."""

    model_config = ConfigDict(extra="allow")

    day: Union[int, float]
    difficulty: str
    puzzle_data: PuzzleData


class TierResult(BaseModel):
    """Outcome of fetching one (type, difficulty) tier for the overview."""

    type: PuzzleType
    difficulty: str
    status: Literal["ok", "not_found", "error"]
    puzzle: Optional[PuzzleRecord] = None
    error: Optional[str] = None


class TranslateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    translated_text: str = Field(..., alias="translatedText")
