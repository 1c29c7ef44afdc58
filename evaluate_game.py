# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Check a recorded game against the pitching and catching safety rules.

Reads a game JSON file with ``game_date`` and a ``players`` list (innings
pitched/caught, pitch counts, age, prior eligibility date) and prints the
violations found, plus each pitcher's next eligible pitch date.

Violations are advisory, so the exit code is 0 whether or not any are
found. It is 1 only when the file cannot be read or is invalid.

Usage::

    uv run evaluate_game.py samples/sample_game.json
    uv run evaluate_game.py samples/sample_game.json --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

import config
from compliance.aggregator import evaluate_lines
from compliance.pitch_count import format_date, has_pitched, official_pitch_count
from compliance.positions import build_inning_sequence
from compliance.rest_days import next_eligible_date_iso
from compliance.validation import EvaluateGameInput, format_validation_error
from models import GameViolationReport, InningState

logger = logging.getLogger("evaluate_game")

INNING_SYMBOLS = {
    InningState.NONE: "-",
    InningState.PITCHING: "P",
    InningState.CATCHING: "C",
    InningState.BOTH: "X",
}


def compute_eligibility(payload: EvaluateGameInput) -> dict[str, str | None]:
    """Next eligible pitch date for every player who pitched in the game."""
    dates = {}
    for line in payload.players:
        if not has_pitched(line.pitched_innings, line.final_pitch_count):
            continue
        count = official_pitch_count(line.penultimate_batter_count, pitched=True)
        dates[line.player_id] = next_eligible_date_iso(payload.game_date, line.age, count)
    return dates


def format_report(report: GameViolationReport, eligibility: dict[str, str | None]) -> str:
    """Render a report as plain text."""
    title = f"Game {report.game_id}" if report.game_id else "Game"
    lines = [f"{title} on {format_date(report.game_date)}"]
    lines.append(f"Players evaluated: {report.evaluated_players}")

    if not report.has_violation:
        lines.append("No violations.")
    else:
        lines.append("VIOLATIONS:")
        for player in report.players:
            lines.append(f"  {player.player_id} ({player.official_pitch_count} pitches)")
            sequence = build_inning_sequence(player.pitched_innings, player.caught_innings)
            lines.append("    Innings: " + " ".join(INNING_SYMBOLS[s] for s in sequence))
            for violation in player.violations:
                lines.append(f"    Rule {violation.rule.value}: {violation.message}")
            if player.conflicting_innings:
                lines.append(
                    f"    Note: recorded at pitcher and catcher in innings {player.conflicting_innings}"
                )

    if eligibility:
        lines.append("Next eligible pitch dates:")
        for player_id, eligible in eligibility.items():
            shown = format_date(eligible) if eligible else "no applicable rule"
            lines.append(f"  {player_id}: {shown}")

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check a recorded game against youth pitching and catching rules."
    )
    parser.add_argument("game_file", help="Path to the game JSON file.")
    parser.add_argument(
        "--json", action="store_true",
        help="Print the report as JSON instead of text.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.get_log_level(),
        format="%(levelname)s: %(message)s",
    )

    path = Path(args.game_file)
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return 1

    try:
        payload = EvaluateGameInput(**data)
    except ValidationError as e:
        print(f"Invalid game file: {format_validation_error(e)}", file=sys.stderr)
        return 1
    except TypeError:
        print("Invalid game file: expected a JSON object", file=sys.stderr)
        return 1

    report = evaluate_lines(payload.players, game_date=payload.game_date, game_id=payload.game_id)
    eligibility = compute_eligibility(payload)
    logger.debug("Evaluated %d players", report.evaluated_players)

    if args.json:
        output = report.model_dump(mode="json")
        output["next_eligible_pitch_dates"] = eligibility
        print(json.dumps(output, indent=2))
    else:
        print(format_report(report, eligibility))

    return 0


if __name__ == "__main__":
    sys.exit(main())
