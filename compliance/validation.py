# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Input validation layer for API operations.

Provides Pydantic input models for each operation, a lookup table from
operation name to model, and helpers that turn validation errors into
messages naming which parameter failed and what was expected.

Validation happens at the boundary only. Once a payload is accepted, the
rule engine normalizes innings itself and never raises.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from config import MAX_INNINGS
from models import (
    PitchingAppearance,
    Player,
    PlayerGameLine,
    PositionAssignment,
    check_iso_date,
)


# ---------------------------------------------------------------------------
# Common validation helpers
# ---------------------------------------------------------------------------

def is_valid_player_id(player_id: str) -> bool:
    """Check that a player ID is a non-empty string."""
    return isinstance(player_id, str) and len(player_id.strip()) > 0


def _check_innings(innings: list[int]) -> list[int]:
    for inning in innings:
        if inning < 1 or inning > MAX_INNINGS:
            raise ValueError(f"Inning numbers must be between 1 and {MAX_INNINGS}, got {inning}")
    return innings


# ---------------------------------------------------------------------------
# Pydantic input models for each operation
# ---------------------------------------------------------------------------


class PlayerLineInput(PlayerGameLine):
    """One player's line as submitted by the game-entry form."""

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, v: str) -> str:
        if not is_valid_player_id(v):
            raise ValueError("Player ID must be a non-empty string")
        return v

    @field_validator("pitched_innings", "caught_innings")
    @classmethod
    def validate_innings(cls, v: list[int]) -> list[int]:
        return _check_innings(v)

    @field_validator("penultimate_batter_count")
    @classmethod
    def validate_penultimate(cls, v: Optional[int], info) -> Optional[int]:
        final = info.data.get("final_pitch_count")
        if v is not None and final is not None and v > final:
            raise ValueError(
                f"Penultimate batter count ({v}) cannot exceed final pitch count ({final})"
            )
        return v


class EvaluateGameInput(BaseModel):
    """Input schema for evaluate_game."""
    game_id: Optional[str] = Field(default=None, description="Identifier echoed in the report.")
    game_date: str = Field(description="Game date (YYYY-MM-DD).")
    players: list[PlayerLineInput] = Field(default_factory=list)

    @field_validator("game_date", mode="before")
    @classmethod
    def validate_game_date(cls, v: Any) -> str:
        return check_iso_date(v)


class RestDayInput(BaseModel):
    """Input schema for calculate_rest_days.

    Accepts either the raw penultimate batter count or an already official
    pitch count.
    """
    age: int = Field(description="Player age.")
    game_date: str = Field(description="Date the player pitched (YYYY-MM-DD).")
    penultimate_batter_count: Optional[int] = Field(default=None, ge=0)
    official_pitch_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("game_date", mode="before")
    @classmethod
    def validate_game_date(cls, v: Any) -> str:
        return check_iso_date(v)

    @model_validator(mode="after")
    def validate_one_count(self) -> RestDayInput:
        if self.official_pitch_count is None and self.penultimate_batter_count is None:
            raise ValueError("Provide penultimate_batter_count or official_pitch_count")
        return self


class PositionInput(PositionAssignment):
    @field_validator("inning_number")
    @classmethod
    def validate_inning(cls, v: int) -> int:
        _check_innings([v])
        return v


class SaveGameInput(BaseModel):
    """Input schema for save_game: the full player section of one game."""
    game_date: str = Field(description="Game date (YYYY-MM-DD).")
    season_id: Optional[str] = None
    team_id: Optional[str] = None
    players: list[Player] = Field(default_factory=list)
    positions: list[PositionInput] = Field(default_factory=list)
    pitching_logs: list[PitchingAppearance] = Field(default_factory=list)

    @field_validator("game_date", mode="before")
    @classmethod
    def validate_game_date(cls, v: Any) -> str:
        return check_iso_date(v)


# ---------------------------------------------------------------------------
# Mapping from operation names to their input models
# ---------------------------------------------------------------------------

REQUEST_INPUT_MODELS: dict[str, type[BaseModel]] = {
    "evaluate_game": EvaluateGameInput,
    "calculate_rest_days": RestDayInput,
    "save_game": SaveGameInput,
}


# ---------------------------------------------------------------------------
# Validation functions
# ---------------------------------------------------------------------------


def validate_request_input(operation: str, **kwargs: Any) -> tuple[bool, Optional[str]]:
    """Validate operation input parameters against the operation's model.

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    model_cls = REQUEST_INPUT_MODELS.get(operation)
    if model_cls is None:
        return False, f"Unknown operation: {operation}"

    try:
        model_cls(**kwargs)
        return True, None
    except ValidationError as e:
        return False, format_validation_error(e)


def format_validation_error(exc: Exception) -> str:
    """Format a Pydantic validation error into a human-readable message.

    Includes which parameter failed and what was expected.
    """
    if isinstance(exc, ValidationError):
        parts = []
        for error in exc.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            parts.append(f"Parameter '{loc}': {msg}")
        return "; ".join(parts)

    return str(exc)
