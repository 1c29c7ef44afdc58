# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""MLB / USA Baseball Pitch Smart guidelines used by the league.

Each age range has a per-game pitch ceiling and a set of rest-day tiers.
Ranges are contiguous and non-overlapping, so a single linear scan finds
the rule for any age.
"""

from __future__ import annotations

from typing import Optional

from models import AgeRule, RestDayTier

# Open-ended top tier.
UNBOUNDED_PITCHES = 999

_SHORT_TIERS = (
    RestDayTier(min_pitches=1, max_pitches=20, rest_days=0),
    RestDayTier(min_pitches=21, max_pitches=35, rest_days=1),
    RestDayTier(min_pitches=36, max_pitches=50, rest_days=2),
)

_FULL_TIERS = _SHORT_TIERS + (
    RestDayTier(min_pitches=51, max_pitches=65, rest_days=3),
    RestDayTier(min_pitches=66, max_pitches=UNBOUNDED_PITCHES, rest_days=4),
)

PITCH_SMART_RULES: tuple[AgeRule, ...] = (
    # Training division, widened from 7-8 to 6-8.
    AgeRule(age_min=6, age_max=8, max_pitches_per_game=50, rest_day_tiers=_SHORT_TIERS),
    AgeRule(age_min=9, age_max=10, max_pitches_per_game=75, rest_day_tiers=_FULL_TIERS),
    AgeRule(age_min=11, age_max=12, max_pitches_per_game=85, rest_day_tiers=_FULL_TIERS),
)


def find_age_rule(
    age: Optional[int],
    rules: tuple[AgeRule, ...] = PITCH_SMART_RULES,
) -> Optional[AgeRule]:
    """Return the rule whose age range contains *age*, or None."""
    if age is None:
        return None
    for rule in rules:
        if rule.contains(age):
            return rule
    return None


def find_rest_day_tier(rule: AgeRule, pitch_count: int) -> Optional[RestDayTier]:
    for tier in rule.rest_day_tiers:
        if tier.contains(pitch_count):
            return tier
    return None


def get_max_pitches_for_age(age: Optional[int]) -> Optional[int]:
    """Return the per-game pitch ceiling for *age*, or None outside the table."""
    rule = find_age_rule(age)
    return rule.max_pitches_per_game if rule else None


def policy_table() -> list[dict]:
    """Serialize the policy table for display."""
    return [rule.model_dump() for rule in PITCH_SMART_RULES]
