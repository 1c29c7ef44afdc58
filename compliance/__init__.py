# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitching and catching safety-compliance engine for youth baseball."""

from compliance.age_policy import PITCH_SMART_RULES, find_age_rule, get_max_pitches_for_age
from compliance.pitch_count import official_pitch_count
from compliance.positions import extract_player_innings, build_inning_sequence
from compliance.violations import (
    has_innings_gap,
    cannot_catch_due_to_high_pitch_count,
    cannot_pitch_due_to_four_innings_catching,
    cannot_catch_again_due_to_combined,
    exceeds_max_pitches_for_age,
    pitched_before_eligible_date,
)
from compliance.rest_days import get_required_rest_days, calculate_next_eligible_date
from compliance.aggregator import (
    evaluate_player,
    evaluate_game,
    evaluate_lines,
    calculate_game_has_violations,
)
