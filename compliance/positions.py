# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Per-player position extraction.

Groups a game's raw position-assignment rows into, per player, the sorted
distinct innings pitched and caught. Rows may come from an untrusted
caller, so ordering and duplicates are normalized here rather than
rejected.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Iterable

from models import InningState, Position, PositionAssignment


def normalize_innings(innings: Iterable[int] | None) -> tuple[int, ...]:
    """Sort numerically and drop duplicates.

    Innings must be whole numbers; a float such as 1.9 raises TypeError
    rather than being truncated.
    """
    if not innings:
        return ()
    return tuple(sorted({operator.index(i) for i in innings}))


@dataclass
class PlayerInnings:
    """Innings one player spent at pitcher and catcher in one game."""
    pitched: tuple[int, ...] = ()
    caught: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        self.pitched = normalize_innings(self.pitched)
        self.caught = normalize_innings(self.caught)


@dataclass
class _Collector:
    pitched: set[int] = field(default_factory=set)
    caught: set[int] = field(default_factory=set)


def _row_fields(row: PositionAssignment | dict[str, Any]) -> tuple[str, int, str]:
    if isinstance(row, PositionAssignment):
        return row.player_id, row.inning_number, row.position.value
    position = row.get("position")
    if isinstance(position, Position):
        position = position.value
    return row["player_id"], operator.index(row["inning_number"]), position


def extract_player_innings(
    assignments: Iterable[PositionAssignment | dict[str, Any]],
) -> dict[str, PlayerInnings]:
    """Group position rows by player.

    Args:
        assignments: Unordered position rows for one game, either
            ``PositionAssignment`` models or dicts with ``player_id``,
            ``inning_number`` and ``position`` keys.

    Returns:
        Mapping of player_id to :class:`PlayerInnings`, in order of each
        player's first row. Positions other than pitcher/catcher are ignored.
    """
    collected: dict[str, _Collector] = {}
    for row in assignments:
        player_id, inning, position = _row_fields(row)
        entry = collected.setdefault(player_id, _Collector())
        if position == Position.PITCHER.value:
            entry.pitched.add(inning)
        elif position == Position.CATCHER.value:
            entry.caught.add(inning)

    return {
        player_id: PlayerInnings(pitched=tuple(c.pitched), caught=tuple(c.caught))
        for player_id, c in collected.items()
    }


def build_inning_sequence(
    pitched: Iterable[int] | None,
    caught: Iterable[int] | None,
) -> list[InningState]:
    """Return one state per inning, from inning 1 to the last recorded inning.

    The result grows with the last inning number, so it is meant for
    display of validated games. Use :func:`conflicting_innings` to find
    double-booked innings.
    """
    pitched_set = set(normalize_innings(pitched))
    caught_set = set(normalize_innings(caught))
    last = max(pitched_set | caught_set, default=0)

    sequence = []
    for inning in range(1, last + 1):
        in_p = inning in pitched_set
        in_c = inning in caught_set
        if in_p and in_c:
            sequence.append(InningState.BOTH)
        elif in_p:
            sequence.append(InningState.PITCHING)
        elif in_c:
            sequence.append(InningState.CATCHING)
        else:
            sequence.append(InningState.NONE)
    return sequence


def conflicting_innings(pitched: Iterable[int] | None, caught: Iterable[int] | None) -> list[int]:
    """Innings recorded at both pitcher and catcher."""
    return sorted(set(normalize_innings(pitched)) & set(normalize_innings(caught)))
