# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the youth pitch compliance engine."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Position(str, Enum):
    PITCHER = "pitcher"
    CATCHER = "catcher"


class InningState(str, Enum):
    NONE = "none"
    PITCHING = "pitching"
    CATCHING = "catching"
    BOTH = "both"  # recorded at both positions, physically impossible


class RuleId(int, Enum):
    CONSECUTIVE_PITCHING = 1
    HIGH_PITCH_COUNT_CATCHING = 2
    FOUR_INNINGS_CATCHING = 3
    RETURN_TO_CATCH = 4
    AGE_PITCH_LIMIT = 5
    REST_DAYS = 6


def check_iso_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError("Date must be a zero-padded YYYY-MM-DD string")
    date.fromisoformat(value)
    return value


# ---------------------------------------------------------------------------
# Policy reference data
# ---------------------------------------------------------------------------

class RestDayTier(BaseModel):
    """A pitch-count band and the rest days it requires."""
    model_config = ConfigDict(frozen=True)

    min_pitches: int = Field(ge=0)
    max_pitches: int = Field(ge=0)
    rest_days: int = Field(ge=0)

    def contains(self, pitch_count: int) -> bool:
        return self.min_pitches <= pitch_count <= self.max_pitches


class AgeRule(BaseModel):
    """Pitch Smart guideline for one age range."""
    model_config = ConfigDict(frozen=True)

    age_min: int
    age_max: int
    max_pitches_per_game: int = Field(ge=1)
    rest_day_tiers: tuple[RestDayTier, ...]

    def contains(self, age: int) -> bool:
        return self.age_min <= age <= self.age_max


# ---------------------------------------------------------------------------
# League entities
# ---------------------------------------------------------------------------

class Player(BaseModel):
    player_id: str = Field(min_length=1)
    age: int
    team_id: Optional[str] = None


class Game(BaseModel):
    """A recorded game. ``has_violation`` is None until the game is evaluated."""
    game_id: str = Field(min_length=1)
    game_date: str
    season_id: Optional[str] = None
    team_id: Optional[str] = None
    has_violation: Optional[bool] = None

    @field_validator("game_date", mode="before")
    @classmethod
    def validate_game_date(cls, v: Any) -> str:
        return check_iso_date(v)


class PositionAssignment(BaseModel):
    game_id: Optional[str] = None
    player_id: str = Field(min_length=1)
    inning_number: int = Field(ge=1)
    position: Position


class PitchingAppearance(BaseModel):
    """One player's pitching line for one game."""
    game_id: Optional[str] = None
    player_id: str = Field(min_length=1)
    final_pitch_count: int = Field(ge=0)
    penultimate_batter_count: int = Field(ge=0)
    next_eligible_pitch_date: Optional[str] = None

    @field_validator("next_eligible_pitch_date", mode="before")
    @classmethod
    def validate_eligible_date(cls, v: Any) -> Optional[str]:
        return check_iso_date(v)

    @model_validator(mode="after")
    def check_counts(self) -> PitchingAppearance:
        if self.penultimate_batter_count > self.final_pitch_count:
            raise ValueError(
                "penultimate_batter_count cannot exceed final_pitch_count "
                f"({self.penultimate_batter_count} > {self.final_pitch_count})"
            )
        return self


class PlayerGameLine(BaseModel):
    """Everything the rules need about one player in one game."""
    player_id: str = Field(min_length=1)
    age: Optional[int] = None
    pitched_innings: list[int] = Field(default_factory=list)
    caught_innings: list[int] = Field(default_factory=list)
    final_pitch_count: Optional[int] = Field(default=None, ge=0)
    penultimate_batter_count: Optional[int] = Field(default=None, ge=0)
    next_eligible_pitch_date: Optional[str] = Field(
        default=None,
        description="Eligibility date from the player's latest prior appearance.",
    )

    @field_validator("next_eligible_pitch_date", mode="before")
    @classmethod
    def validate_eligible_date(cls, v: Any) -> Optional[str]:
        return check_iso_date(v)


# ---------------------------------------------------------------------------
# Evaluation output
# ---------------------------------------------------------------------------

class RuleViolation(BaseModel):
    rule: RuleId
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class PlayerViolationReport(BaseModel):
    """Rule results for one player in one game."""
    player_id: str
    official_pitch_count: int = 0
    pitched_innings: list[int] = Field(default_factory=list)
    caught_innings: list[int] = Field(default_factory=list)
    violations: list[RuleViolation] = Field(default_factory=list)
    conflicting_innings: list[int] = Field(
        default_factory=list,
        description="Innings recorded at both pitcher and catcher.",
    )

    @computed_field
    @property
    def has_violation(self) -> bool:
        return bool(self.violations)

    @property
    def violated_rules(self) -> set[RuleId]:
        return {v.rule for v in self.violations}


class GameViolationReport(BaseModel):
    """Aggregate result for one game: the flag plus per-player detail."""
    game_id: Optional[str] = None
    game_date: Optional[str] = None
    has_violation: bool = False
    players: list[PlayerViolationReport] = Field(
        default_factory=list,
        description="Only players with at least one violation.",
    )
    evaluated_players: int = 0
