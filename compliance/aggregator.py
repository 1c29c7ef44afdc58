# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Game violation aggregator.

Runs rules 1-6 over every player in a game and reduces the results to a
single advisory ``has_violation`` flag plus a per-player detail list, both
from one pass. Evaluation never raises for validated input and never
decides whether data may be saved.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from compliance.age_policy import get_max_pitches_for_age
from compliance.pitch_count import has_pitched, official_pitch_count
from compliance.positions import conflicting_innings, extract_player_innings, normalize_innings
from compliance.violations import (
    COMBINED_PITCH_COUNT_THRESHOLD,
    HIGH_PITCH_COUNT_THRESHOLD,
    cannot_catch_again_due_to_combined,
    cannot_catch_due_to_high_pitch_count,
    cannot_pitch_due_to_four_innings_catching,
    exceeds_max_pitches_for_age,
    has_innings_gap,
    pitched_before_eligible_date,
)
from models import (
    GameViolationReport,
    PitchingAppearance,
    PlayerGameLine,
    PlayerViolationReport,
    PositionAssignment,
    RuleId,
    RuleViolation,
)

logger = logging.getLogger(__name__)


def evaluate_player(
    line: PlayerGameLine,
    game_date: date | str | None = None,
) -> PlayerViolationReport:
    """Evaluate rules 1-6 for one player's line in one game."""
    pitched = normalize_innings(line.pitched_innings)
    caught = normalize_innings(line.caught_innings)
    pitches = official_pitch_count(
        line.penultimate_batter_count,
        pitched=has_pitched(pitched, line.final_pitch_count),
    )

    violations: list[RuleViolation] = []

    if has_innings_gap(pitched):
        violations.append(RuleViolation(
            rule=RuleId.CONSECUTIVE_PITCHING,
            message="A pitcher cannot return after being taken out. "
                    "Innings must be consecutive (e.g., 1,2,3 or 4,5,6).",
            context={"pitched_innings": list(pitched)},
        ))

    if cannot_catch_due_to_high_pitch_count(pitched, caught, pitches):
        violations.append(RuleViolation(
            rule=RuleId.HIGH_PITCH_COUNT_CATCHING,
            message=f"Player threw {pitches} pitches ({HIGH_PITCH_COUNT_THRESHOLD}+) "
                    "and cannot catch for the remainder of this game.",
            context={
                "official_pitch_count": pitches,
                "caught_after": [i for i in caught if i > pitched[-1]],
            },
        ))

    if cannot_pitch_due_to_four_innings_catching(pitched, caught):
        violations.append(RuleViolation(
            rule=RuleId.FOUR_INNINGS_CATCHING,
            message=f"Player caught {len(caught)} innings and cannot pitch "
                    f"after the 4th catching inning (inning {caught[3]}).",
            context={"caught_innings": list(caught), "fourth_catching_inning": caught[3]},
        ))

    if cannot_catch_again_due_to_combined(pitched, caught, pitches):
        before = [i for i in caught if i < pitched[0]]
        violations.append(RuleViolation(
            rule=RuleId.RETURN_TO_CATCH,
            message=f"Player caught {len(before)} innings before pitching and threw "
                    f"{pitches} pitches ({COMBINED_PITCH_COUNT_THRESHOLD}+). "
                    "Cannot catch again in this game.",
            context={
                "official_pitch_count": pitches,
                "caught_before": before,
                "caught_after": [i for i in caught if i > pitched[-1]],
            },
        ))

    if exceeds_max_pitches_for_age(line.age, pitches):
        max_pitches = get_max_pitches_for_age(line.age)
        violations.append(RuleViolation(
            rule=RuleId.AGE_PITCH_LIMIT,
            message=f"Threw {pitches} pitches, exceeding the maximum of "
                    f"{max_pitches} for age {line.age}.",
            context={"official_pitch_count": pitches, "max_pitches": max_pitches, "age": line.age},
        ))

    if pitched_before_eligible_date(
        game_date, line.next_eligible_pitch_date, pitched, line.final_pitch_count,
    ):
        game_day = game_date.isoformat() if isinstance(game_date, date) else game_date
        violations.append(RuleViolation(
            rule=RuleId.REST_DAYS,
            message=f"Pitched on {game_day} before required rest was complete. "
                    f"Next eligible pitch date is {line.next_eligible_pitch_date}.",
            context={"game_date": game_day, "next_eligible_pitch_date": line.next_eligible_pitch_date},
        ))

    return PlayerViolationReport(
        player_id=line.player_id,
        official_pitch_count=pitches,
        pitched_innings=list(pitched),
        caught_innings=list(caught),
        violations=violations,
        conflicting_innings=conflicting_innings(pitched, caught),
    )


def evaluate_lines(
    lines: Iterable[PlayerGameLine],
    game_date: date | str | None = None,
    game_id: Optional[str] = None,
) -> GameViolationReport:
    """Evaluate pre-grouped player lines and aggregate the results."""
    flagged: list[PlayerViolationReport] = []
    evaluated = 0
    for line in lines:
        evaluated += 1
        report = evaluate_player(line, game_date)
        if report.conflicting_innings:
            logger.debug(
                "Player %s recorded at pitcher and catcher in innings %s",
                line.player_id, report.conflicting_innings,
            )
        if report.has_violation:
            flagged.append(report)

    return GameViolationReport(
        game_id=game_id,
        game_date=game_date.isoformat() if isinstance(game_date, date) else game_date,
        has_violation=bool(flagged),
        players=flagged,
        evaluated_players=evaluated,
    )


def build_player_lines(
    positions: Iterable[PositionAssignment | dict[str, Any]],
    pitching_logs: Iterable[PitchingAppearance | dict[str, Any]] = (),
    player_ages: Mapping[str, Optional[int]] | None = None,
    eligibility_dates: Mapping[str, Optional[str]] | None = None,
) -> list[PlayerGameLine]:
    """Join raw position rows and pitching logs into one line per player.

    Every player with a position row or a pitching log gets a line. A later
    log for the same player replaces an earlier one.
    """
    player_ages = player_ages or {}
    eligibility_dates = eligibility_dates or {}
    innings = extract_player_innings(positions)

    logs: dict[str, PitchingAppearance] = {}
    for log in pitching_logs:
        if isinstance(log, dict):
            log = PitchingAppearance(**log)
        logs[log.player_id] = log

    player_ids = list(innings)
    player_ids.extend(pid for pid in logs if pid not in innings)

    lines = []
    for player_id in player_ids:
        player_innings = innings.get(player_id)
        log = logs.get(player_id)
        lines.append(PlayerGameLine(
            player_id=player_id,
            age=player_ages.get(player_id),
            pitched_innings=list(player_innings.pitched) if player_innings else [],
            caught_innings=list(player_innings.caught) if player_innings else [],
            final_pitch_count=log.final_pitch_count if log else None,
            penultimate_batter_count=log.penultimate_batter_count if log else None,
            next_eligible_pitch_date=eligibility_dates.get(player_id),
        ))
    return lines


def evaluate_game(
    positions: Iterable[PositionAssignment | dict[str, Any]],
    pitching_logs: Iterable[PitchingAppearance | dict[str, Any]] = (),
    player_ages: Mapping[str, Optional[int]] | None = None,
    game_date: date | str | None = None,
    eligibility_dates: Mapping[str, Optional[str]] | None = None,
    game_id: Optional[str] = None,
) -> GameViolationReport:
    """Evaluate a game from its raw position rows and pitching logs.

    Args:
        positions: Position rows for the game.
        pitching_logs: Pitching appearances for the game.
        player_ages: Map of player_id to age (rule 5).
        game_date: Date of the game (rule 6).
        eligibility_dates: Map of player_id to the next eligible pitch date
            from that player's latest prior appearance (rule 6).
        game_id: Optional identifier echoed in the report.

    Returns:
        A :class:`GameViolationReport` with the flag and per-player detail.
    """
    lines = build_player_lines(positions, pitching_logs, player_ages, eligibility_dates)
    return evaluate_lines(lines, game_date=game_date, game_id=game_id)


def calculate_game_has_violations(
    positions: Iterable[PositionAssignment | dict[str, Any]],
    pitching_logs: Iterable[PitchingAppearance | dict[str, Any]] = (),
    player_ages: Mapping[str, Optional[int]] | None = None,
    game_date: date | str | None = None,
    eligibility_dates: Mapping[str, Optional[str]] | None = None,
) -> bool:
    """Return only the aggregate flag for a game."""
    return evaluate_game(
        positions, pitching_logs, player_ages, game_date, eligibility_dates,
    ).has_violation
