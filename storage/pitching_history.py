# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Append-only pitching history with optional JSON file persistence.

Every save of a game's player section appends a new *revision* of that
game's pitching appearances; earlier revisions are kept but no longer
active. A player's latest eligibility date is derived at read time from
the active appearance with the greatest ``(game_date, sequence)``, so ties
on the same date resolve by creation order.

Usage::

    from storage.pitching_history import PitchingHistory

    history = PitchingHistory()                      # in memory
    history = PitchingHistory("/tmp/history.json")   # persisted

    with history.locked(["p1", "p2"]):
        prior = history.eligibility_dates(
            ["p1", "p2"], exclude_game_id="g7", on_or_before=game.game_date,
        )
        history.record_game(game, appearances)

The store does not serialize concurrent saves by itself. Callers that can
save two games for the same player at once must hold :meth:`locked` for
the players involved across the read-evaluate-write sequence;
:class:`game_service.GameService` does this.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, Field

from models import Game

logger = logging.getLogger(__name__)


class AppearanceRecord(BaseModel):
    """An immutable pitching appearance as stored."""
    sequence: int
    revision: int
    game_id: str
    game_date: str
    player_id: str
    final_pitch_count: int = 0
    penultimate_batter_count: int = 0
    official_pitch_count: int = 0
    next_eligible_pitch_date: Optional[str] = None


class GameRecord(BaseModel):
    """A saved game plus the player section it was saved with."""
    game: Game
    revision: int
    history_sequence: int = Field(
        default=0,
        description="Last appearance sequence recorded before this revision was saved.",
    )
    section: dict[str, Any] = Field(default_factory=dict)


class PitchingHistory:
    """Saved games and their pitching appearances.

    Args:
        path: JSON file to load from and write to. ``None`` keeps everything
            in memory.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._appearances: list[AppearanceRecord] = []
        self._games: dict[str, GameRecord] = {}
        self._revisions: dict[str, int] = {}
        self._sequence = 0
        self._guard = threading.Lock()
        self._player_locks: dict[str, threading.Lock] = {}
        if self._path is not None and self._path.exists():
            self._load()

    # -- locking -------------------------------------------------------------

    def player_lock(self, player_id: str) -> threading.Lock:
        """Return the lock that serializes writes to one player's history."""
        with self._guard:
            return self._player_locks.setdefault(player_id, threading.Lock())

    @contextmanager
    def locked(self, player_ids: Iterable[str]) -> Iterator[None]:
        """Hold the locks of every listed player, acquired in sorted order."""
        locks = [self.player_lock(pid) for pid in sorted(set(player_ids))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()

    # -- reads ---------------------------------------------------------------

    def get_game(self, game_id: str) -> Optional[GameRecord]:
        return self._games.get(game_id)

    def list_games(self) -> list[Game]:
        return sorted(
            (record.game for record in self._games.values()),
            key=lambda g: (g.game_date, g.game_id),
        )

    def has_player(self, player_id: str) -> bool:
        """Whether any saved game lists the player in its player section."""
        with self._guard:
            sections = [record.section for record in self._games.values()]
        for section in sections:
            for key in ("players", "positions", "pitching_logs"):
                if any(row.get("player_id") == player_id for row in section.get(key, [])):
                    return True
        return False

    def active_appearances(self, game_id: Optional[str] = None) -> list[AppearanceRecord]:
        """Appearances from each game's latest revision."""
        with self._guard:
            return [
                a for a in self._appearances
                if self._revisions.get(a.game_id) == a.revision
                and (game_id is None or a.game_id == game_id)
            ]

    def latest_for_player(
        self,
        player_id: str,
        exclude_game_id: Optional[str] = None,
        on_or_before: Optional[str] = None,
        max_sequence: Optional[int] = None,
    ) -> Optional[AppearanceRecord]:
        """Return the player's chronologically latest active appearance.

        Ordered by game date, then creation order. The game being evaluated
        is excluded so a re-save never reads its own previous result.

        Args:
            player_id: Player to look up.
            exclude_game_id: Game whose appearances are ignored.
            on_or_before: Only appearances from games dated on or before
                this ISO date count, so a later game never affects an
                earlier one.
            max_sequence: Only appearances recorded at or before this
                sequence number count, i.e. those that already existed
                when a game was saved.
        """
        candidates = [
            a for a in self.active_appearances()
            if a.player_id == player_id
            and a.game_id != exclude_game_id
            and (on_or_before is None or a.game_date <= on_or_before)
            and (max_sequence is None or a.sequence <= max_sequence)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda a: (a.game_date, a.sequence))

    def latest_eligibility_date(
        self,
        player_id: str,
        exclude_game_id: Optional[str] = None,
        on_or_before: Optional[str] = None,
        max_sequence: Optional[int] = None,
    ) -> Optional[str]:
        latest = self.latest_for_player(player_id, exclude_game_id, on_or_before, max_sequence)
        return latest.next_eligible_pitch_date if latest else None

    def eligibility_dates(
        self,
        player_ids: Iterable[str],
        exclude_game_id: Optional[str] = None,
        on_or_before: Optional[str] = None,
        max_sequence: Optional[int] = None,
    ) -> dict[str, Optional[str]]:
        return {
            pid: self.latest_eligibility_date(pid, exclude_game_id, on_or_before, max_sequence)
            for pid in player_ids
        }


    # -- writes --------------------------------------------------------------

    def record_game(
        self,
        game: Game,
        appearances: Iterable[dict[str, Any]],
        section: dict[str, Any] | None = None,
    ) -> list[AppearanceRecord]:
        """Append a new revision of *game* and its pitching appearances.

        Args:
            game: The game being saved.
            appearances: Dicts with ``player_id``, ``final_pitch_count``,
                ``penultimate_batter_count``, ``official_pitch_count`` and
                ``next_eligible_pitch_date``.
            section: The raw player section, kept for on-demand re-evaluation.

        Returns:
            The appended records.
        """
        with self._guard:
            revision = self._revisions.get(game.game_id, 0) + 1
            history_sequence = self._sequence
            added = []
            for entry in appearances:
                self._sequence += 1
                record = AppearanceRecord(
                    sequence=self._sequence,
                    revision=revision,
                    game_id=game.game_id,
                    game_date=game.game_date,
                    **entry,
                )
                self._appearances.append(record)
                added.append(record)
            self._revisions[game.game_id] = revision
            self._games[game.game_id] = GameRecord(
                game=game, revision=revision, history_sequence=history_sequence,
                section=section or {},
            )
        self._save()
        return added

    def set_violation_flag(self, game_id: str, has_violation: Optional[bool]) -> None:
        """Write the advisory violation flag back onto a saved game."""
        with self._guard:
            record = self._games.get(game_id)
            if record is None:
                return
            record.game.has_violation = has_violation
        self._save()

    def delete_game(self, game_id: str) -> bool:
        """Remove a game. Its appearances stop being active.

        Returns:
            ``True`` if the game existed.
        """
        with self._guard:
            if game_id not in self._games:
                return False
            del self._games[game_id]
            # A revision no appearance carries deactivates the game's rows.
            self._revisions[game_id] = self._revisions.get(game_id, 0) + 1
        self._save()
        return True

    # -- persistence ---------------------------------------------------------

    def _load(self) -> None:
        try:
            with open(self._path) as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("Failed to load pitching history from %s: %s", self._path, exc)
            raise
        self._appearances = [AppearanceRecord(**a) for a in raw.get("appearances", [])]
        self._games = {g["game"]["game_id"]: GameRecord(**g) for g in raw.get("games", [])}
        self._revisions = dict(raw.get("revisions", {}))
        self._sequence = max((a.sequence for a in self._appearances), default=0)
        logger.debug(
            "Loaded %d appearances across %d games from %s",
            len(self._appearances), len(self._games), self._path,
        )

    def _save(self) -> None:
        if self._path is None:
            return
        with self._guard:
            payload = {
                "appearances": [a.model_dump() for a in self._appearances],
                "games": [g.model_dump() for g in self._games.values()],
                "revisions": self._revisions,
            }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            with open(tmp_path, "w") as f:
                json.dump(payload, f, separators=(",", ":"))
            tmp_path.replace(self._path)  # atomic rename
        except OSError as exc:
            logger.error("Failed to write pitching history to %s: %s", self._path, exc)
            raise
