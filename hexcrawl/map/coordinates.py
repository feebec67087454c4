"""Axial coordinate system for the hex crawl map.

This module implements the flat-topped hexagonal grid used by the map editor
and the player view.

Coordinate System:
    - Axial coordinates (q, r) with the implicit cube coordinate s = -q - r
    - Pixel projection is flat-top: x = size * (sqrt(3) * q + sqrt(3)/2 * r),
      y = size * 3/2 * r
    - The rectangular display grid is addressed by offset (col, row) where
      q = col - floor(row / 2) and r = row

Direction Numbering:
    0 = Right      : (+1,  0)
    1 = Top-right  : (+1, -1)
    2 = Top-left   : ( 0, -1)
    3 = Left       : (-1,  0)
    4 = Bottom-left: (-1, +1)
    5 = Bottom-right: ( 0, +1)
"""
from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from ..models import AxialCoordinate, MapDimensions, PixelCoordinate

HEX_SIZE_DEFAULT = 30.0
SQRT3 = math.sqrt(3)

AXIAL_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),
    (+1, -1),
    ( 0, -1),
    (-1,  0),
    (-1, +1),
    ( 0, +1),
]


def axial_to_pixel(hex: AxialCoordinate, hex_size: float = HEX_SIZE_DEFAULT) -> PixelCoordinate:
    """Project a hex centre into pixel space.

    Zoom and pan are applied by the caller; no rounding happens here.

    Args:
        hex: Axial coordinate
        hex_size: Distance from hex centre to a corner

    Returns:
        Pixel coordinate of the hex centre
    """
    x = hex_size * (SQRT3 * hex.q + SQRT3 / 2 * hex.r)
    y = hex_size * (3 / 2 * hex.r)
    return PixelCoordinate(x, y)


def hex_round(q: float, r: float) -> AxialCoordinate:
    """Round fractional axial coordinates to the nearest hex.

    Rounds in cube space, then recomputes whichever component carried the
    largest rounding error so that q + r + s == 0 still holds.
    """
    s = -q - r
    rq = round(q)
    rr = round(r)
    rs = round(s)

    q_diff = abs(rq - q)
    r_diff = abs(rr - r)
    s_diff = abs(rs - s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs
    return AxialCoordinate(int(rq), int(rr))


def pixel_to_hex(pixel: PixelCoordinate, hex_size: float = HEX_SIZE_DEFAULT) -> AxialCoordinate:
    """Return the hex containing ``pixel``.

    Args:
        pixel: Point in the same space ``axial_to_pixel`` produces
        hex_size: Distance from hex centre to a corner

    Returns:
        Nearest axial coordinate
    """
    q = (SQRT3 / 3 * pixel.x - 1 / 3 * pixel.y) / hex_size
    r = (2 / 3 * pixel.y) / hex_size
    return hex_round(q, r)


def hex_distance(a: AxialCoordinate, b: AxialCoordinate) -> int:
    """Number of steps between two hexes.

    Uses (|dq| + |dr| + |dq + dr|) / 2, which equals the cube-coordinate
    maximum norm.
    """
    dq = a.q - b.q
    dr = a.r - b.r
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def hex_neighbor(hex: AxialCoordinate, direction: int) -> AxialCoordinate:
    """Return the neighbour of ``hex`` in direction 0-5 (wraps modulo 6)."""
    dq, dr = AXIAL_DIRECTIONS[direction % 6]
    return AxialCoordinate(hex.q + dq, hex.r + dr)


def hex_neighbors(hex: AxialCoordinate) -> List[AxialCoordinate]:
    """Return all 6 neighbours of ``hex`` in direction order."""
    return [hex_neighbor(hex, direction) for direction in range(6)]


def hexes_in_range(center: AxialCoordinate, radius: int) -> List[AxialCoordinate]:
    """Return every hex within ``radius`` steps of ``center``, centre included.

    For radius n the result holds exactly 3n^2 + 3n + 1 distinct hexes.
    A negative radius yields an empty list.

    Args:
        center: Centre hex
        radius: Maximum distance (sight range, brush radius, ...)

    Returns:
        List of coordinates ordered by q then r offset
    """
    results: List[AxialCoordinate] = []
    for dq in range(-radius, radius + 1):
        r1 = max(-radius, -dq - radius)
        r2 = min(radius, -dq + radius)
        for dr in range(r1, r2 + 1):
            results.append(AxialCoordinate(center.q + dq, center.r + dr))
    return results


def offset_to_axial(col: int, row: int) -> AxialCoordinate:
    """Convert display grid (col, row) to axial coordinates."""
    return AxialCoordinate(col - math.floor(row / 2), row)


def axial_to_offset(hex: AxialCoordinate) -> Tuple[int, int]:
    """Convert axial coordinates to display grid ``(col, row)``."""
    row = hex.r
    col = hex.q + math.floor(row / 2)
    return col, row


def rectangular_grid(dimensions: MapDimensions) -> List[AxialCoordinate]:
    """Return every hex of a width x height display grid in row-major order."""
    return [
        offset_to_axial(col, row)
        for row in range(dimensions.height)
        for col in range(dimensions.width)
    ]


def hexes_in_rectangle(start: AxialCoordinate, end: AxialCoordinate) -> List[AxialCoordinate]:
    """Return the axial bounding rectangle spanned by a drag selection.

    Args:
        start: Hex where the drag began
        end: Hex under the pointer

    Returns:
        Coordinates with q in [min q, max q] and r in [min r, max r]
    """
    min_q, max_q = sorted((start.q, end.q))
    min_r, max_r = sorted((start.r, end.r))
    return [
        AxialCoordinate(q, r)
        for q in range(min_q, max_q + 1)
        for r in range(min_r, max_r + 1)
    ]


def hex_key(hex: AxialCoordinate) -> str:
    return hex.key()


def key_to_hex(key: str) -> AxialCoordinate:
    return AxialCoordinate.from_key(key)


def keys(hexes: Iterable[AxialCoordinate]) -> List[str]:
    return [h.key() for h in hexes]


__all__ = [
    "AXIAL_DIRECTIONS",
    "HEX_SIZE_DEFAULT",
    "axial_to_offset",
    "axial_to_pixel",
    "hex_distance",
    "hex_key",
    "hex_neighbor",
    "hex_neighbors",
    "hex_round",
    "hexes_in_range",
    "hexes_in_rectangle",
    "key_to_hex",
    "keys",
    "offset_to_axial",
    "pixel_to_hex",
    "rectangular_grid",
]
