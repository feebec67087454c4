"""Connected-region discovery for the flood fill tool.

The fill is split in two steps: ``flood_fill`` finds the region so the caller
can preview it (and ask for confirmation on large regions), then
``apply_flood_fill`` produces the updated cell map.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, Iterable, List, Optional, Set

from ..models import (
    AxialCoordinate,
    CellMap,
    HexCell,
    LandmarkType,
    MapDimensions,
    TerrainType,
)
from .coordinates import hex_neighbors


@dataclass(frozen=True)
class FillMatcher:
    """Content a hex must carry to join the region.

    ``None`` for a field means "must be absent", so the default matcher
    selects empty hexes.
    """

    terrain: Optional[TerrainType] = None
    landmark: Optional[LandmarkType] = None

    @classmethod
    def of(cls, cell: Optional[HexCell]) -> "FillMatcher":
        if cell is None:
            return cls()
        return cls(terrain=cell.terrain, landmark=cell.landmark)

    @property
    def is_empty(self) -> bool:
        return self.terrain is None and self.landmark is None

    def matches(self, cell: Optional[HexCell]) -> bool:
        terrain = cell.terrain if cell is not None else None
        landmark = cell.landmark if cell is not None else None
        return terrain == self.terrain and landmark == self.landmark


@dataclass(frozen=True)
class FloodFillPreview:
    hexes: List[AxialCoordinate]
    count: int
    is_large_operation: bool


def flood_fill(
    start: AxialCoordinate,
    cells: CellMap,
    matcher: Optional[FillMatcher] = None,
    *,
    max_hexes: Optional[int] = None,
    dimensions: Optional[MapDimensions] = None,
) -> List[AxialCoordinate]:
    """Return the connected region around ``start`` that shares its content.

    The matcher is frozen before traversal starts: it defaults to the start
    hex's terrain and landmark as found in ``cells``. An empty matcher only
    walks hexes present in ``cells``, or every in-bounds hex when
    ``dimensions`` is given, so the search always terminates.

    Args:
        start: Hex the user clicked
        cells: Read-only cell map keyed by ``"q,r"``
        matcher: Content to match; ``None`` uses the start hex
        max_hexes: Optional cap on the region size
        dimensions: Optional map bounds; hexes outside are never visited

    Returns:
        Region in breadth-first order, start hex first. Empty when the start
        hex does not match an explicit matcher.
    """
    if matcher is None:
        matcher = FillMatcher.of(cells.get(start.key()))

    def walkable(hex: AxialCoordinate) -> bool:
        if dimensions is not None:
            return dimensions.contains(hex)
        if matcher.is_empty:
            return hex.key() in cells
        return True

    if dimensions is not None and not dimensions.contains(start):
        return []
    if not matcher.matches(cells.get(start.key())):
        return []

    result: List[AxialCoordinate] = []
    visited: Set[AxialCoordinate] = {start}
    queue: Deque[AxialCoordinate] = deque([start])

    while queue:
        if max_hexes is not None and len(result) >= max_hexes:
            break
        current = queue.popleft()
        result.append(current)
        for neighbor in hex_neighbors(current):
            if neighbor in visited:
                continue
            if not walkable(neighbor) or not matcher.matches(cells.get(neighbor.key())):
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return result


def flood_fill_preview(
    start: AxialCoordinate,
    cells: CellMap,
    matcher: Optional[FillMatcher] = None,
    *,
    large_threshold: int = 20,
    max_hexes: Optional[int] = 100,
    dimensions: Optional[MapDimensions] = None,
) -> FloodFillPreview:
    hexes = flood_fill(start, cells, matcher, max_hexes=max_hexes, dimensions=dimensions)
    return FloodFillPreview(
        hexes=hexes,
        count=len(hexes),
        is_large_operation=len(hexes) > large_threshold,
    )


def apply_flood_fill(
    hexes: Iterable[AxialCoordinate],
    cells: CellMap,
    terrain: Optional[TerrainType] = None,
    landmark: Optional[LandmarkType] = None,
    clear_existing: bool = False,
) -> Dict[str, HexCell]:
    """Return a copy of ``cells`` with the fill applied to ``hexes``.

    Fields left as ``None`` keep their current value unless
    ``clear_existing`` wipes all content. Exploration flags are preserved.
    """
    updated: Dict[str, HexCell] = dict(cells)
    for hex in hexes:
        key = hex.key()
        existing = updated.get(key) or HexCell()
        if clear_existing:
            cell = HexCell(is_explored=existing.is_explored, is_visible=existing.is_visible)
        else:
            cell = replace(
                existing,
                terrain=terrain if terrain is not None else existing.terrain,
                landmark=landmark if landmark is not None else existing.landmark,
            )
        updated[key] = cell
    return updated


__all__ = [
    "FillMatcher",
    "FloodFillPreview",
    "apply_flood_fill",
    "flood_fill",
    "flood_fill_preview",
]
