# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Official pitch count and pitching display helpers.

The final batter's pitch total is easy to under-report, so every rule uses
the count through the penultimate batter plus one guaranteed pitch.

Dates are handled as ``datetime.date`` values only. ISO ``YYYY-MM-DD``
strings map to the same calendar day on every machine regardless of the
local timezone.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from models import PitchingAppearance

NEVER_PITCHED = "Never pitched"
NO_COUNT = "--"
ELIGIBLE_NOW = "Eligible now"
NOT_AVAILABLE = "N/A"


def official_pitch_count(penultimate_batter_count: Optional[int], pitched: bool = True) -> int:
    """Return the official pitch count used by every rule.

    Args:
        penultimate_batter_count: Pitches thrown through the next-to-last
            batter faced. Zero means the pitcher faced a single batter.
        pitched: Whether the player pitched at all in the game.

    Returns:
        ``penultimate_batter_count + 1``, or 0 when the player did not pitch
        or no count was recorded.
    """
    if not pitched or penultimate_batter_count is None:
        return 0
    return penultimate_batter_count + 1


def has_pitched(pitched_innings: Optional[Iterable[int]], final_pitch_count: Optional[int]) -> bool:
    """Whether a player pitched in a game: any pitched inning or a positive pitch count."""
    return bool(pitched_innings) or bool(final_pitch_count)


def parse_local_date(value: date | str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string (or pass through a date) as a calendar day."""
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("parse_local_date requires a valid date string")
    return date.fromisoformat(value)


def format_date(value: date | str | None) -> str:
    """Format a date like ``May 14, 2025``; ``N/A`` when empty."""
    if not value:
        return NOT_AVAILABLE
    d = parse_local_date(value)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def is_currently_ineligible(next_eligible_pitch_date: date | str | None, today: date | None = None) -> bool:
    """Whether a player is still inside a rest period on *today*."""
    if not next_eligible_pitch_date:
        return False
    today = today or date.today()
    return parse_local_date(next_eligible_pitch_date) > today


def get_pitching_display_data(
    appearance: PitchingAppearance | dict[str, Any] | None,
    game_date: date | str | None = None,
) -> dict[str, str]:
    """Build the roster summary for a player's most recent pitching appearance.

    Args:
        appearance: The latest appearance, or None if the player never pitched.
        game_date: Date of the game the appearance belongs to.

    Returns:
        Dict with ``last_date``, ``official_count`` and ``next_eligible_date``
        display strings.
    """
    if appearance is None or not game_date:
        return {
            "last_date": NEVER_PITCHED,
            "official_count": NO_COUNT,
            "next_eligible_date": NO_COUNT,
        }

    if isinstance(appearance, dict):
        appearance = PitchingAppearance(**appearance)

    count = official_pitch_count(appearance.penultimate_batter_count)
    eligible = appearance.next_eligible_pitch_date
    return {
        "last_date": format_date(game_date),
        "official_count": str(count) if count > 0 else NO_COUNT,
        "next_eligible_date": format_date(eligible) if eligible else ELIGIBLE_NOW,
    }
