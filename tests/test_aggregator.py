# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the game violation aggregator.

Validates:
  1. A clean game yields has_violation False and an empty detail list
  2. Any violating player yields has_violation True with named rules
  3. Rule messages carry the context needed to render them
  4. Players with only a pitching log are evaluated
  5. Evaluation is idempotent and independent of row order
  6. Same-inning pitcher/catcher rows are reported without raising the flag
"""

import random
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from compliance.aggregator import (
    build_player_lines,
    calculate_game_has_violations,
    evaluate_game,
    evaluate_lines,
    evaluate_player,
)
from models import PlayerGameLine, RuleId


def positions(player_id, pitched=(), caught=()):
    rows = [{"player_id": player_id, "inning_number": i, "position": "pitcher"} for i in pitched]
    rows += [{"player_id": player_id, "inning_number": i, "position": "catcher"} for i in caught]
    return rows


def log(player_id, final, penultimate):
    return {"player_id": player_id, "final_pitch_count": final, "penultimate_batter_count": penultimate}


# -----------------------------------------------------------------------
# Single player
# -----------------------------------------------------------------------

class TestEvaluatePlayer:
    def test_clean_line(self):
        line = PlayerGameLine(
            player_id="p1", age=10, pitched_innings=[1, 2, 3],
            final_pitch_count=40, penultimate_batter_count=35,
        )
        report = evaluate_player(line, "2025-05-12")
        assert report.has_violation is False
        assert report.official_pitch_count == 36
        assert report.violations == []

    def test_gap_rule(self):
        line = PlayerGameLine(
            player_id="p1", age=10, pitched_innings=[4, 1, 2],
            final_pitch_count=20, penultimate_batter_count=18,
        )
        report = evaluate_player(line)
        assert report.violated_rules == {RuleId.CONSECUTIVE_PITCHING}
        assert report.pitched_innings == [1, 2, 4]

    def test_age_limit_message(self):
        line = PlayerGameLine(
            player_id="p1", age=10, pitched_innings=[1, 2, 3, 4],
            final_pitch_count=80, penultimate_batter_count=75,
        )
        report = evaluate_player(line)
        assert report.violated_rules == {RuleId.AGE_PITCH_LIMIT}
        violation = report.violations[0]
        assert violation.context["official_pitch_count"] == 76
        assert violation.context["max_pitches"] == 75
        assert "exceeding the maximum of 75 for age 10" in violation.message

    def test_age_limit_boundary(self):
        line = PlayerGameLine(
            player_id="p1", age=10, pitched_innings=[1, 2, 3, 4],
            final_pitch_count=78, penultimate_batter_count=74,
        )
        assert evaluate_player(line).has_violation is False

    def test_rest_day_message(self):
        line = PlayerGameLine(
            player_id="p1", age=11, pitched_innings=[1],
            final_pitch_count=10, penultimate_batter_count=8,
            next_eligible_pitch_date="2025-05-14",
        )
        report = evaluate_player(line, "2025-05-12")
        assert report.violated_rules == {RuleId.REST_DAYS}
        assert report.violations[0].context["next_eligible_pitch_date"] == "2025-05-14"
        assert "2025-05-14" in report.violations[0].message

    def test_rest_day_applies_to_log_without_innings(self):
        line = PlayerGameLine(
            player_id="p1", age=10, final_pitch_count=40, penultimate_batter_count=39,
            next_eligible_pitch_date="2025-05-14",
        )
        report = evaluate_player(line, "2025-05-12")
        assert report.official_pitch_count == 40
        assert report.violated_rules == {RuleId.REST_DAYS}

    def test_huge_inning_number(self):
        with patch("compliance.positions.build_inning_sequence", side_effect=AssertionError):
            report = evaluate_player(
                PlayerGameLine(player_id="p1", pitched_innings=[1], caught_innings=[5_000_000]),
            )
        assert report.conflicting_innings == []
        assert report.caught_innings == [5_000_000]

    def test_rest_day_not_applied_without_game_date(self):
        line = PlayerGameLine(
            player_id="p1", pitched_innings=[1],
            final_pitch_count=10, penultimate_batter_count=8,
            next_eligible_pitch_date="2025-05-14",
        )
        assert evaluate_player(line).has_violation is False

    def test_multiple_rules_for_one_player(self):
        # Caught 1-3, pitched 4-5 and 7 with 45 pitches, caught 8.
        line = PlayerGameLine(
            player_id="p1", age=9, pitched_innings=[4, 5, 7], caught_innings=[1, 2, 3, 8],
            final_pitch_count=48, penultimate_batter_count=44,
        )
        report = evaluate_player(line)
        assert report.violated_rules == {
            RuleId.CONSECUTIVE_PITCHING,
            RuleId.HIGH_PITCH_COUNT_CATCHING,
            RuleId.RETURN_TO_CATCH,
        }

    def test_catcher_only_has_zero_pitches(self):
        line = PlayerGameLine(player_id="c1", age=12, caught_innings=[1, 2, 3, 4, 5, 6])
        report = evaluate_player(line)
        assert report.official_pitch_count == 0
        assert report.has_violation is False

    def test_conflicting_innings_are_not_violations(self):
        line = PlayerGameLine(
            player_id="p1", age=10, pitched_innings=[1, 2], caught_innings=[2],
            final_pitch_count=15, penultimate_batter_count=12,
        )
        report = evaluate_player(line)
        assert report.conflicting_innings == [2]
        assert report.has_violation is False


# -----------------------------------------------------------------------
# Whole game
# -----------------------------------------------------------------------

class TestEvaluateGame:
    def test_clean_game(self):
        rows = positions("a", pitched=[1, 2, 3]) + positions("b", caught=[1, 2, 3])
        report = evaluate_game(rows, [log("a", 30, 28)], {"a": 10, "b": 10}, "2025-05-10")
        assert report.has_violation is False
        assert report.players == []
        assert report.evaluated_players == 2

    def test_violating_game(self):
        rows = (
            positions("a", pitched=[1, 2, 3])
            + positions("b", pitched=[4, 5, 6], caught=[1, 2, 3, 7])
        )
        logs = [log("a", 30, 28), log("b", 30, 26)]
        report = evaluate_game(rows, logs, {"a": 10, "b": 11}, "2025-05-10", game_id="g1")
        assert report.has_violation is True
        assert report.game_id == "g1"
        assert [p.player_id for p in report.players] == ["b"]
        assert report.players[0].violated_rules == {RuleId.RETURN_TO_CATCH}

    def test_pitching_log_without_positions(self):
        report = evaluate_game([], [log("a", 90, 86)], {"a": 12}, "2025-05-10")
        assert report.evaluated_players == 1
        assert report.players[0].violated_rules == {RuleId.AGE_PITCH_LIMIT}

    def test_cross_game_eligibility(self):
        rows = positions("a", pitched=[1, 2])
        report = evaluate_game(
            rows, [log("a", 20, 18)], {"a": 10}, "2025-05-12",
            eligibility_dates={"a": "2025-05-14"},
        )
        assert report.players[0].violated_rules == {RuleId.REST_DAYS}

        report = evaluate_game(
            rows, [log("a", 20, 18)], {"a": 10}, "2025-05-14",
            eligibility_dates={"a": "2025-05-14"},
        )
        assert report.has_violation is False

    def test_empty_game(self):
        report = evaluate_game([])
        assert report.has_violation is False
        assert report.evaluated_players == 0

    def test_flag_only_helper(self):
        rows = positions("a", pitched=[1, 3])
        assert calculate_game_has_violations(rows, [log("a", 10, 8)]) is True
        assert calculate_game_has_violations(positions("a", pitched=[1, 2])) is False

    def test_idempotent(self):
        rows = positions("a", pitched=[1, 2, 4]) + positions("b", caught=[1, 2, 3, 4], pitched=[5])
        logs = [log("a", 50, 45), log("b", 10, 8)]
        first = evaluate_game(rows, logs, {"a": 10, "b": 10}, "2025-05-10")
        second = evaluate_game(rows, logs, {"a": 10, "b": 10}, "2025-05-10")
        assert first == second

    def test_row_order_does_not_change_result(self):
        rows = (
            positions("a", pitched=[4, 5, 6, 7, 8, 9], caught=[1, 2, 3, 10])
            + positions("b", pitched=[1, 2, 3], caught=[10])
        )
        logs = [log("a", 30, 25), log("b", 50, 44)]
        expected = evaluate_game(rows, logs, {"a": 12, "b": 12}, "2025-05-10")
        rng = random.Random(7)
        for _ in range(10):
            shuffled = rows[:]
            rng.shuffle(shuffled)
            result = evaluate_game(shuffled, logs, {"a": 12, "b": 12}, "2025-05-10")
            assert result.has_violation == expected.has_violation
            by_player = {p.player_id: p.violated_rules for p in result.players}
            assert by_player == {p.player_id: p.violated_rules for p in expected.players}


class TestBuildPlayerLines:
    def test_joins_positions_logs_ages_and_dates(self):
        rows = positions("a", pitched=[2, 1]) + positions("b", caught=[3])
        lines = build_player_lines(
            rows, [log("a", 22, 20), log("c", 5, 4)],
            {"a": 9, "b": 10, "c": 11}, {"a": "2025-05-01"},
        )
        by_id = {line.player_id: line for line in lines}
        assert [line.player_id for line in lines] == ["a", "b", "c"]
        assert by_id["a"].pitched_innings == [1, 2]
        assert by_id["a"].penultimate_batter_count == 20
        assert by_id["a"].next_eligible_pitch_date == "2025-05-01"
        assert by_id["b"].final_pitch_count is None
        assert by_id["c"].age == 11

    def test_evaluate_lines_matches_evaluate_game(self):
        rows = positions("a", pitched=[1, 3])
        lines = build_player_lines(rows, [log("a", 10, 8)])
        assert evaluate_lines(lines).has_violation is True
