# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Rest-day calculator.

Derives, from one pitching appearance, the earliest calendar date the
player may pitch again. Eligibility resumes the day after the last
mandated rest day, so a pitcher with 3 rest days after a May 10 game is
eligible on May 14.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from compliance.age_policy import find_age_rule, find_rest_day_tier
from compliance.pitch_count import parse_local_date


def get_required_rest_days(age: Optional[int], pitch_count: int) -> Optional[int]:
    """Return required rest days for *age* and official *pitch_count*.

    Returns None when no age rule or pitch-count tier applies (for example
    a zero pitch count, or an age outside the policy table).

    Example:
        >>> get_required_rest_days(12, 21)
        1
        >>> get_required_rest_days(10, 66)
        4
    """
    rule = find_age_rule(age)
    if rule is None:
        return None
    tier = find_rest_day_tier(rule, pitch_count)
    if tier is None:
        return None
    return tier.rest_days


def calculate_next_eligible_date(
    game_date: date | str,
    age: Optional[int],
    pitch_count: int,
) -> Optional[date]:
    """Return the next date the player may pitch, or None if no rule applies."""
    rest_days = get_required_rest_days(age, pitch_count)
    if rest_days is None:
        return None
    return parse_local_date(game_date) + timedelta(days=rest_days + 1)


def next_eligible_date_iso(
    game_date: date | str,
    age: Optional[int],
    pitch_count: int,
) -> Optional[str]:
    """Same as :func:`calculate_next_eligible_date`, as a storable ISO string."""
    eligible = calculate_next_eligible_date(game_date, age, pitch_count)
    return eligible.isoformat() if eligible else None
