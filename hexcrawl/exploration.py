"""Exploration and visibility state for the player view.

Two sets drive what players see:

* ``explored`` only grows (until an explicit reset): every hex a player has
  ever had in sight.
* ``visible`` is recomputed from scratch whenever player positions or the
  sight distance change.

``hex_visibility`` turns those flags into a show/hide verdict for the
current view and reveal mode.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from .map.coordinates import hexes_in_range
from .models import AxialCoordinate, CellMap, RevealMode, ViewMode, coerce_enum

MIN_SIGHT_DISTANCE = 1
MAX_SIGHT_DISTANCE = 10
DEFAULT_SIGHT_DISTANCE = 2


@dataclass(frozen=True)
class HexVisibility:
    should_show: bool
    is_explored: bool
    is_currently_visible: bool


def hex_visibility(
    mode: Union[ViewMode, str],
    reveal_mode: Union[RevealMode, str],
    is_explored: bool,
    is_visible_now: bool,
) -> HexVisibility:
    """Decide whether a hex is drawn for the given view.

    The GM sees everything. Players see explored hexes in permanent mode and
    only hexes currently in sight in line-of-sight mode.
    """
    mode = coerce_enum(ViewMode, mode)
    reveal_mode = coerce_enum(RevealMode, reveal_mode)
    if mode is ViewMode.GM:
        return HexVisibility(should_show=True, is_explored=is_explored, is_currently_visible=True)
    if reveal_mode is RevealMode.PERMANENT:
        should_show = is_explored
    else:
        should_show = is_visible_now
    return HexVisibility(
        should_show=should_show,
        is_explored=is_explored,
        is_currently_visible=is_visible_now,
    )


def clamp_sight_distance(
    value: int,
    minimum: int = MIN_SIGHT_DISTANCE,
    maximum: int = MAX_SIGHT_DISTANCE,
) -> int:
    return max(minimum, min(maximum, int(value)))


def compute_visible_hexes(
    player_positions: Iterable[AxialCoordinate],
    sight_distance: int,
) -> FrozenSet[str]:
    """Union of the sight ranges of every player token."""
    visible = set()
    for pos in player_positions:
        visible.update(h.key() for h in hexes_in_range(pos, sight_distance))
    return frozenset(visible)


@dataclass(frozen=True)
class MapStats:
    total_cells: int
    explored_cells: int
    exploration_percentage: float


@dataclass(frozen=True)
class ExplorationState:
    """Immutable snapshot of explored/visible sets.

    Every operation returns a new state; ``history`` lists keys in the order
    they were first explored.
    """

    explored: FrozenSet[str] = frozenset()
    visible: FrozenSet[str] = frozenset()
    history: Tuple[str, ...] = field(default_factory=tuple)

    def update_visibility(
        self,
        player_positions: Iterable[AxialCoordinate],
        sight_distance: int,
    ) -> "ExplorationState":
        visible = compute_visible_hexes(player_positions, sight_distance)
        newly_explored = tuple(sorted(visible - self.explored, key=_key_order))
        return ExplorationState(
            explored=self.explored | visible,
            visible=visible,
            history=self.history + newly_explored,
        )

    def explore(self, hex: AxialCoordinate) -> "ExplorationState":
        return self.explore_many([hex])

    def explore_many(self, hexes: Iterable[AxialCoordinate]) -> "ExplorationState":
        explored = set(self.explored)
        history = list(self.history)
        for hex in hexes:
            key = hex.key()
            if key in explored:
                continue
            explored.add(key)
            history.append(key)
        return ExplorationState(frozenset(explored), self.visible, tuple(history))

    def unexplore(self, hex: AxialCoordinate) -> "ExplorationState":
        key = hex.key()
        return ExplorationState(
            explored=self.explored - {key},
            visible=self.visible,
            history=tuple(k for k in self.history if k != key),
        )

    def reset(self) -> "ExplorationState":
        return ExplorationState()

    def is_explored(self, hex: AxialCoordinate) -> bool:
        return hex.key() in self.explored

    def is_visible(self, hex: AxialCoordinate) -> bool:
        return hex.key() in self.visible

    def visibility_for(
        self,
        hex: AxialCoordinate,
        mode: Union[ViewMode, str],
        reveal_mode: Union[RevealMode, str],
    ) -> HexVisibility:
        return hex_visibility(mode, reveal_mode, self.is_explored(hex), self.is_visible(hex))

    def stats(self, cells: Optional[CellMap] = None) -> MapStats:
        total = len(cells) if cells is not None else 0
        explored = len(self.explored)
        percentage = explored / total * 100 if total > 0 else 0.0
        return MapStats(total_cells=total, explored_cells=explored, exploration_percentage=percentage)


def _key_order(key: str) -> AxialCoordinate:
    return AxialCoordinate.from_key(key)


__all__ = [
    "DEFAULT_SIGHT_DISTANCE",
    "ExplorationState",
    "HexVisibility",
    "MAX_SIGHT_DISTANCE",
    "MIN_SIGHT_DISTANCE",
    "MapStats",
    "clamp_sight_distance",
    "compute_visible_hexes",
    "hex_visibility",
]
