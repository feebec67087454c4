"""Validation helpers for map documents.

Bounds are a map-level concept: the geometry functions never reject a
coordinate, so these checks report problems as messages instead of raising.
"""
from __future__ import annotations

from typing import Iterable, List

from ..models import AxialCoordinate, CellMap, MapDimensions
from ..exploration import MAX_SIGHT_DISTANCE, MIN_SIGHT_DISTANCE
from .coordinates import axial_to_offset


def validate_dimensions(dimensions: MapDimensions) -> List[str]:
    """Check that the display grid has a usable size.

    Args:
        dimensions: Map width and height in offset space

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if dimensions.width <= 0:
        errors.append(f"Map width must be positive, found {dimensions.width}")
    if dimensions.height <= 0:
        errors.append(f"Map height must be positive, found {dimensions.height}")
    return errors


def validate_cells(cells: CellMap, dimensions: MapDimensions) -> List[str]:
    """Check that stored cells lie on the map and are keyed canonically.

    Checks:
    - Keys round-trip through ``"q,r"`` encoding
    - Every cell falls inside the display grid

    Args:
        cells: Cell map keyed by ``"q,r"``
        dimensions: Map width and height

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []
    for key in cells:
        try:
            coord = AxialCoordinate.from_key(key)
        except ValueError as exc:
            warnings.append(str(exc))
            continue
        if coord.key() != key:
            warnings.append(f"Cell key {key!r} is not canonical (expected {coord.key()!r})")
        if not dimensions.contains(coord):
            col, row = axial_to_offset(coord)
            warnings.append(
                f"Cell {key} lies outside the {dimensions.width}x{dimensions.height} map "
                f"(col={col}, row={row})"
            )
    return warnings


def validate_player_positions(
    positions: Iterable[AxialCoordinate],
    dimensions: MapDimensions,
    sight_distance: int,
) -> List[str]:
    """Check player tokens and the sight distance.

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []
    seen = set()
    for pos in positions:
        if pos in seen:
            warnings.append(f"Duplicate player position ({pos.q}, {pos.r})")
        seen.add(pos)
        if not dimensions.contains(pos):
            warnings.append(f"Player at ({pos.q}, {pos.r}) is off the map")
    if not (MIN_SIGHT_DISTANCE <= sight_distance <= MAX_SIGHT_DISTANCE):
        warnings.append(
            f"Sight distance {sight_distance} outside {MIN_SIGHT_DISTANCE}-{MAX_SIGHT_DISTANCE}; it will be clamped"
        )
    return warnings


def validate_all(
    cells: CellMap,
    dimensions: MapDimensions,
    positions: Iterable[AxialCoordinate] = (),
    sight_distance: int = 2,
) -> List[str]:
    errors = validate_dimensions(dimensions)
    if errors:
        return errors
    return (
        validate_cells(cells, dimensions)
        + validate_player_positions(positions, dimensions, sight_distance)
    )


__all__ = [
    "validate_all",
    "validate_cells",
    "validate_dimensions",
    "validate_player_positions",
]
