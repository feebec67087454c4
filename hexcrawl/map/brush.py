"""Brush footprints for painting terrain and landmarks.

Brushes come in the fixed size ladder 1/3/5/7 and three shapes. The circle
follows hex distance; the square is a window in offset (col, row) space and
the diamond bounds |dq| + |dr| in axial space, so the three give visibly
different footprints on the hex grid.
"""
from __future__ import annotations

from typing import List, Union

from ..models import BRUSH_SIZES, AxialCoordinate, BrushShape, InvalidEnumError, coerce_enum
from .coordinates import axial_to_offset, hex_distance, offset_to_axial

_SHAPE_LABELS = {
    BrushShape.CIRCLE: "●",
    BrushShape.SQUARE: "■",
    BrushShape.DIAMOND: "◆",
}


def _check_size(size: int) -> int:
    if isinstance(size, bool) or size not in BRUSH_SIZES:
        raise InvalidEnumError(f"Unknown brush size {size!r} (expected one of {BRUSH_SIZES})")
    return int(size)


def brush_hexes(
    center: AxialCoordinate,
    size: int,
    shape: Union[BrushShape, str],
) -> List[AxialCoordinate]:
    """Return the hexes painted by a brush centred on ``center``.

    Args:
        center: Hex under the pointer
        size: Brush size from the 1/3/5/7 ladder
        shape: Brush shape

    Returns:
        Coordinates to paint, centre included; not filtered by map bounds

    Raises:
        InvalidEnumError: For a size or shape outside the supported set
    """
    size = _check_size(size)
    shape = coerce_enum(BrushShape, shape)
    if size == 1:
        return [center]

    radius = size // 2
    if shape is BrushShape.SQUARE:
        col, row = axial_to_offset(center)
        return [
            offset_to_axial(col + dcol, row + drow)
            for drow in range(-radius, radius + 1)
            for dcol in range(-radius, radius + 1)
        ]

    hexes: List[AxialCoordinate] = []
    for dq in range(-radius, radius + 1):
        for dr in range(-radius, radius + 1):
            hex = AxialCoordinate(center.q + dq, center.r + dr)
            if shape is BrushShape.CIRCLE:
                inside = hex_distance(hex, center) <= radius
            else:
                inside = abs(dq) + abs(dr) <= radius
            if inside:
                hexes.append(hex)
    return hexes


def brush_size_label(size: int) -> str:
    size = _check_size(size)
    return f"{size}×{size}"


def brush_shape_label(shape: Union[BrushShape, str]) -> str:
    return _SHAPE_LABELS[coerce_enum(BrushShape, shape)]


__all__ = ["brush_hexes", "brush_size_label", "brush_shape_label"]
