"""Hex grid geometry: coordinates, brushes, flood fill and patterns."""

from .brush import brush_hexes
from .coordinates import (
    axial_to_offset,
    axial_to_pixel,
    hex_distance,
    hex_neighbors,
    hexes_in_range,
    offset_to_axial,
    pixel_to_hex,
)
from .flood_fill import FillMatcher, apply_flood_fill, flood_fill
from .patterns import capture, paste, preview_paste, transform

__all__ = [
    "FillMatcher",
    "apply_flood_fill",
    "axial_to_offset",
    "axial_to_pixel",
    "brush_hexes",
    "capture",
    "flood_fill",
    "hex_distance",
    "hex_neighbors",
    "hexes_in_range",
    "offset_to_axial",
    "paste",
    "pixel_to_hex",
    "preview_paste",
    "transform",
]
