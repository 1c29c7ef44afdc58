# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Game save and review workflow.

Saving a game's player section is two separate phases:

1. Persist: store the game, and for every pitching appearance compute and
   store the next eligible pitch date.
2. Evaluate: run the rule engine and write the advisory ``has_violation``
   flag back onto the game.

Phase 1 never consults phase 2, so a violation can never stop data from
being saved. Both phases run while holding the per-player history locks
of everyone in the game, which keeps the rule 6 read and the eligibility
write for one player from interleaving with another save.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from compliance.aggregator import build_player_lines, evaluate_lines
from compliance.pitch_count import get_pitching_display_data, has_pitched, official_pitch_count
from compliance.rest_days import next_eligible_date_iso
from compliance.validation import SaveGameInput
from models import Game, GameViolationReport, PitchingAppearance, Position
from storage.pitching_history import PitchingHistory

logger = logging.getLogger(__name__)


class GameNotFoundError(KeyError):
    """Raised when a game id is not in the store."""


class PlayerNotFoundError(KeyError):
    """Raised when no saved game mentions a player."""


@dataclass
class SaveResult:
    """Outcome of saving one game."""
    game: Game
    report: Optional[GameViolationReport]
    eligibility: dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "game": self.game.model_dump(),
            "report": self.report.model_dump(mode="json") if self.report else None,
            "next_eligible_pitch_dates": self.eligibility,
        }


def _section_player_ids(section: SaveGameInput) -> list[str]:
    ids = {p.player_id for p in section.players}
    ids.update(p.player_id for p in section.positions)
    ids.update(log.player_id for log in section.pitching_logs)
    return sorted(ids)


def _appearance_pitched(section: SaveGameInput, log: PitchingAppearance) -> bool:
    pitched_innings = [
        p.inning_number for p in section.positions
        if p.player_id == log.player_id and p.position is Position.PITCHER
    ]
    return has_pitched(pitched_innings, log.final_pitch_count)


class GameService:
    """Saves games into a :class:`PitchingHistory` and evaluates them."""

    def __init__(self, history: PitchingHistory | None = None) -> None:
        self.history = history or PitchingHistory()

    def save_game(self, game_id: str, section: SaveGameInput) -> SaveResult:
        """Save (or re-save) the player section of a game.

        Args:
            game_id: Identifier of the game.
            section: Validated player section.

        Returns:
            The stored game with its violation flag, the evaluation report,
            and the next eligible date computed for every pitcher.
        """
        game = Game(
            game_id=game_id,
            game_date=section.game_date,
            season_id=section.season_id,
            team_id=section.team_id,
        )
        ages = {p.player_id: p.age for p in section.players}
        player_ids = _section_player_ids(section)

        with self.history.locked(player_ids):
            prior_dates = self.history.eligibility_dates(
                player_ids, exclude_game_id=game_id, on_or_before=game.game_date,
            )

            # Phase 1: persist
            eligibility: dict[str, Optional[str]] = {}
            appearances = []
            for log in section.pitching_logs:
                count = official_pitch_count(
                    log.penultimate_batter_count,
                    pitched=_appearance_pitched(section, log),
                )
                eligible = next_eligible_date_iso(game.game_date, ages.get(log.player_id), count)
                eligibility[log.player_id] = eligible
                appearances.append({
                    "player_id": log.player_id,
                    "final_pitch_count": log.final_pitch_count,
                    "penultimate_batter_count": log.penultimate_batter_count,
                    "official_pitch_count": count,
                    "next_eligible_pitch_date": eligible,
                })
            self.history.record_game(game, appearances, section=section.model_dump(mode="json"))

            # Phase 2: evaluate
            report = self._evaluate(game, section, ages, prior_dates)

        if report is not None and report.has_violation:
            logger.info(
                "Game %s saved with violations for players %s",
                game_id, [p.player_id for p in report.players],
            )
        return SaveResult(game=game, report=report, eligibility=eligibility)

    def _evaluate(
        self,
        game: Game,
        section: SaveGameInput,
        ages: dict[str, int],
        prior_dates: dict[str, Optional[str]],
    ) -> Optional[GameViolationReport]:
        try:
            lines = build_player_lines(section.positions, section.pitching_logs, ages, prior_dates)
            report = evaluate_lines(lines, game_date=game.game_date, game_id=game.game_id)
        except Exception:
            # The game is already stored; leave its flag unset.
            logger.exception("Violation evaluation failed for game %s", game.game_id)
            return None
        game.has_violation = report.has_violation
        self.history.set_violation_flag(game.game_id, report.has_violation)
        return report

    def evaluate_stored_game(self, game_id: str) -> GameViolationReport:
        """Re-run the rules for a saved game, e.g. for a detail view."""
        record = self.history.get_game(game_id)
        if record is None:
            raise GameNotFoundError(game_id)
        section = SaveGameInput(**record.section)
        ages = {p.player_id: p.age for p in section.players}
        # Only history that existed when this revision was saved, so the
        # review matches the stored flag.
        prior_dates = self.history.eligibility_dates(
            _section_player_ids(section),
            exclude_game_id=game_id,
            on_or_before=record.game.game_date,
            max_sequence=record.history_sequence,
        )
        lines = build_player_lines(section.positions, section.pitching_logs, ages, prior_dates)
        return evaluate_lines(lines, game_date=record.game.game_date, game_id=game_id)

    def get_game(self, game_id: str) -> Game:
        record = self.history.get_game(game_id)
        if record is None:
            raise GameNotFoundError(game_id)
        return record.game

    def delete_game(self, game_id: str) -> None:
        if not self.history.delete_game(game_id):
            raise GameNotFoundError(game_id)

    def player_pitching_summary(self, player_id: str) -> dict[str, Any]:
        """Roster summary of the player's latest pitching appearance."""
        latest = self.history.latest_for_player(player_id)
        if latest is None:
            if not self.history.has_player(player_id):
                raise PlayerNotFoundError(player_id)
            return {"player_id": player_id, **get_pitching_display_data(None)}
        appearance = PitchingAppearance(
            game_id=latest.game_id,
            player_id=player_id,
            final_pitch_count=latest.final_pitch_count,
            penultimate_batter_count=latest.penultimate_batter_count,
            next_eligible_pitch_date=latest.next_eligible_pitch_date,
        )
        return {
            "player_id": player_id,
            "game_id": latest.game_id,
            "next_eligible_pitch_date": latest.next_eligible_pitch_date,
            **get_pitching_display_data(appearance, latest.game_date),
        }
