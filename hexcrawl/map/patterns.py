"""Copy/paste patterns and the transforms used by the template system.

A pattern stores content relative to an origin hex of the captured region.
Rotation, mirroring and scaling act on those relative coordinates only; the
absolute map is touched exclusively by ``apply_to_cells``.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..models import (
    AxialCoordinate,
    CellMap,
    HexCell,
    HexCellContent,
    InvalidEnumError,
    MapDimensions,
    MirrorAxis,
    Pattern,
    coerce_enum,
)
from .coordinates import hex_round

ROTATION_ANGLES: Tuple[int, ...] = (0, 60, 120, 180, 240, 300, 360)

Placement = Tuple[AxialCoordinate, HexCellContent]


def capture(
    selected: Sequence[AxialCoordinate],
    cells: CellMap,
    origin: Optional[AxialCoordinate] = None,
) -> Pattern:
    """Capture the content of ``selected`` hexes into a pattern.

    Only hexes with copyable content become entries; the dimensions still
    cover the whole selection.

    Args:
        selected: Hexes inside the selection rectangle
        cells: Read-only cell map keyed by ``"q,r"``
        origin: Reference hex; defaults to the smallest selected coordinate

    Returns:
        Immutable pattern; empty with 0x0 dimensions for an empty selection
    """
    if not selected:
        return Pattern()
    if origin is None:
        origin = min(selected)

    entries: Dict[AxialCoordinate, HexCellContent] = {}
    min_q = min(h.q for h in selected)
    max_q = max(h.q for h in selected)
    min_r = min(h.r for h in selected)
    max_r = max(h.r for h in selected)

    for hex in selected:
        cell = cells.get(hex.key())
        if cell is None:
            continue
        content = cell.content()
        if content.is_empty():
            continue
        entries[hex - origin] = content

    return Pattern(
        cells=entries,
        dimensions=MapDimensions(max_q - min_q + 1, max_r - min_r + 1),
    )


def paste(pattern: Pattern, target_origin: AxialCoordinate) -> List[Placement]:
    """Place every pattern entry relative to ``target_origin``.

    Out-of-bounds placements are kept; the caller filters them.
    """
    return [(target_origin + rel, content) for rel, content in pattern]


def preview_paste(
    pattern: Pattern,
    target_origin: AxialCoordinate,
    dimensions: MapDimensions,
) -> List[AxialCoordinate]:
    """Hexes a paste at ``target_origin`` would touch inside the map."""
    return [coord for coord, _ in paste(pattern, target_origin) if dimensions.contains(coord)]


def rotate_coordinate(coord: AxialCoordinate, steps: int) -> AxialCoordinate:
    """Rotate ``coord`` about the origin by ``steps`` x 60 degrees.

    Each step maps cube (q, r, s) to (-r, -s, -q).
    """
    q, r = coord.q, coord.r
    for _ in range(steps % 6):
        q, r = -r, q + r
    return AxialCoordinate(q, r)


def mirror_coordinate(coord: AxialCoordinate, axis: Union[MirrorAxis, str]) -> AxialCoordinate:
    """Reflect ``coord`` across a hex axis through the origin.

    ``q`` keeps q and swaps r with s, ``r`` keeps r and swaps q with s, and
    ``both`` is the point reflection (-q, -r). Reflections swap cube
    components; no axial component is negated on its own.
    """
    axis = coerce_enum(MirrorAxis, axis)
    q, r, s = coord.q, coord.r, coord.s
    if axis is MirrorAxis.Q:
        return AxialCoordinate(q, s)
    if axis is MirrorAxis.R:
        return AxialCoordinate(s, r)
    return AxialCoordinate(-q, -r)


def scale_coordinate(coord: AxialCoordinate, factor: float) -> AxialCoordinate:
    return hex_round(coord.q * factor, coord.r * factor)


def rotation_steps(degrees: int) -> int:
    if isinstance(degrees, bool) or degrees not in ROTATION_ANGLES:
        raise InvalidEnumError(
            f"Unsupported rotation {degrees!r} (expected one of {ROTATION_ANGLES})"
        )
    return int(degrees) // 60 % 6


def _remap(pattern: Pattern, fn) -> Pattern:
    entries: Dict[AxialCoordinate, HexCellContent] = {}
    for rel, content in pattern:
        entries.setdefault(fn(rel), content)
    return Pattern(cells=entries, dimensions=pattern.dimensions)


def rotate(pattern: Pattern, degrees: int) -> Pattern:
    steps = rotation_steps(degrees)
    if steps == 0:
        return pattern
    return _remap(pattern, lambda c: rotate_coordinate(c, steps))


def mirror(pattern: Pattern, axis: Union[MirrorAxis, str]) -> Pattern:
    axis = coerce_enum(MirrorAxis, axis)
    return _remap(pattern, lambda c: mirror_coordinate(c, axis))


def scale(pattern: Pattern, factor: float) -> Pattern:
    """Scale relative coordinates by ``factor`` and snap them to hexes.

    Entries that land on the same hex keep the first one in coordinate order.

    Raises:
        ValueError: If ``factor`` is not positive
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor!r}")
    if factor == 1:
        return pattern
    scaled = _remap(pattern, lambda c: scale_coordinate(c, factor))
    dims = MapDimensions(
        max(1, round(pattern.dimensions.width * factor)) if pattern.dimensions.width else 0,
        max(1, round(pattern.dimensions.height * factor)) if pattern.dimensions.height else 0,
    )
    return Pattern(cells=scaled.cells, dimensions=dims)


def transform(
    pattern: Pattern,
    rotation: int = 0,
    mirror_axis: Optional[Union[MirrorAxis, str]] = None,
    scale_factor: float = 1,
) -> Pattern:
    """Mirror, then rotate, then scale a pattern."""
    if mirror_axis is not None:
        pattern = mirror(pattern, mirror_axis)
    pattern = rotate(pattern, rotation)
    return scale(pattern, scale_factor)


def apply_to_cells(
    placements: Iterable[Placement],
    cells: CellMap,
    dimensions: Optional[MapDimensions] = None,
) -> Dict[str, HexCell]:
    """Return a copy of ``cells`` with ``placements`` written in.

    Existing exploration flags survive; placements outside ``dimensions``
    are dropped when dimensions are given.
    """
    updated: Dict[str, HexCell] = dict(cells)
    for coord, content in placements:
        if dimensions is not None and not dimensions.contains(coord):
            continue
        key = coord.key()
        existing = updated.get(key) or HexCell()
        updated[key] = existing.with_content(content)
    return updated


__all__ = [
    "ROTATION_ANGLES",
    "apply_to_cells",
    "capture",
    "mirror",
    "mirror_coordinate",
    "paste",
    "preview_paste",
    "rotate",
    "rotate_coordinate",
    "rotation_steps",
    "scale",
    "scale_coordinate",
    "transform",
]
