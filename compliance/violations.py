# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitching and catching safety rules.

Each rule is a pure predicate over one player's innings and official pitch
count, returning True when the rule is violated. Innings are normalized
(sorted, de-duplicated) before every check so callers may pass raw lists.

Rules:
1. A pitcher removed from the mound may not return in the same game.
2. 41+ pitches: the player may not catch for the remainder of the game.
3. 4+ innings caught: the player may not pitch afterwards.
4. Caught 1-3 innings, then pitched 21+: may not return to catch.
5. Official pitch count may not exceed the age-based ceiling.
6. A player may not pitch before their next eligible pitch date.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from compliance.age_policy import get_max_pitches_for_age
from compliance.pitch_count import has_pitched
from compliance.positions import normalize_innings

HIGH_PITCH_COUNT_THRESHOLD = 41
COMBINED_PITCH_COUNT_THRESHOLD = 21
CATCHING_INNINGS_LIMIT = 4
MAX_CATCHING_BEFORE_PITCHING = 3


def has_innings_gap(innings: Iterable[int] | None) -> bool:
    """Rule 1: pitched innings must be consecutive.

    A gap is the only observable signature of "removed, then returned".
    """
    ordered = normalize_innings(innings)
    if len(ordered) <= 1:
        return False
    return any(b - a > 1 for a, b in zip(ordered, ordered[1:]))


def cannot_catch_due_to_high_pitch_count(
    pitched_innings: Iterable[int] | None,
    caught_innings: Iterable[int] | None,
    official_pitches: int,
) -> bool:
    """Rule 2: catching after the last pitching inning with 41+ pitches."""
    pitched = normalize_innings(pitched_innings)
    caught = normalize_innings(caught_innings)
    if official_pitches < HIGH_PITCH_COUNT_THRESHOLD or not pitched or not caught:
        return False
    last_pitched = pitched[-1]
    return any(inning > last_pitched for inning in caught)


def cannot_pitch_due_to_four_innings_catching(
    pitched_innings: Iterable[int] | None,
    caught_innings: Iterable[int] | None,
) -> bool:
    """Rule 3: pitching after the 4th catching inning.

    Innings pitched before the 4th catching appearance are allowed.
    """
    pitched = normalize_innings(pitched_innings)
    caught = normalize_innings(caught_innings)
    if len(caught) < CATCHING_INNINGS_LIMIT or not pitched:
        return False
    fourth_catch = caught[CATCHING_INNINGS_LIMIT - 1]
    return any(inning > fourth_catch for inning in pitched)


def cannot_catch_again_due_to_combined(
    pitched_innings: Iterable[int] | None,
    caught_innings: Iterable[int] | None,
    official_pitches: int,
) -> bool:
    """Rule 4: caught 1-3 innings, pitched 21+, then returned to catch.

    Only catching strictly before the first pitching inning counts toward
    the 1-3 window. A player with four total catching innings, three of
    them before pitching, still violates when they return to catch.
    """
    pitched = normalize_innings(pitched_innings)
    caught = normalize_innings(caught_innings)
    if not pitched or official_pitches < COMBINED_PITCH_COUNT_THRESHOLD:
        return False
    first_pitched, last_pitched = pitched[0], pitched[-1]
    before = [i for i in caught if i < first_pitched]
    after = [i for i in caught if i > last_pitched]
    return 1 <= len(before) <= MAX_CATCHING_BEFORE_PITCHING and len(after) >= 1


def exceeds_max_pitches_for_age(age: Optional[int], official_pitches: int) -> bool:
    """Rule 5: official count strictly above the age ceiling.

    Ages outside the policy table are not covered and never violate.
    """
    if not age:
        return False
    max_pitches = get_max_pitches_for_age(age)
    if max_pitches is None:
        return False
    return official_pitches > max_pitches


def pitched_before_eligible_date(
    game_date: date | str | None,
    next_eligible_pitch_date: date | str | None,
    pitched_innings: Iterable[int] | None,
    final_pitch_count: Optional[int] = None,
) -> bool:
    """Rule 6: pitched before the eligibility date from a prior appearance.

    A player with a positive final pitch count pitched even when no
    pitching innings were recorded.

    Both dates are compared as zero-padded ISO strings, so lexicographic
    order is calendar order. Pitching on the eligible date is compliant.

    Example:
        >>> pitched_before_eligible_date("2025-05-12", "2025-05-14", [1, 2])
        True
        >>> pitched_before_eligible_date("2025-05-14", "2025-05-14", [1, 2])
        False
    """
    if not has_pitched(normalize_innings(pitched_innings), final_pitch_count):
        return False
    if not next_eligible_pitch_date or not game_date:
        return False
    if isinstance(game_date, date):
        game_date = game_date.isoformat()
    if isinstance(next_eligible_pitch_date, date):
        next_eligible_pitch_date = next_eligible_pitch_date.isoformat()
    return game_date < next_eligible_pitch_date
