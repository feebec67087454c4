"""Core data types shared by the geometry, exploration and pattern modules."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar


class InvalidEnumError(ValueError):
    """Raised when an unrecognised shape, size, mode or angle reaches the engine."""


class MapDataError(ValueError):
    """Raised when a map document cannot be decoded into cells or coordinates."""


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any) -> E:
    """Return ``value`` as a member of ``enum_cls`` or fail fast."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise InvalidEnumError(
            f"Unknown {enum_cls.__name__} {value!r} (expected one of {allowed})"
        ) from None


class TerrainType(str, Enum):
    MOUNTAINS = "mountains"
    PLAINS = "plains"
    SWAMPS = "swamps"
    WATER = "water"
    DESERT = "desert"
    HILLS = "hills"
    SHALLOW_WATER = "shallowWater"
    DEEP_WATER = "deepWater"
    OCEAN_WATER = "oceanWater"


class LandmarkType(str, Enum):
    VILLAGE = "village"
    HAMLET = "hamlet"
    TOWN = "town"
    CITY = "city"
    TOWER = "tower"
    MARKER = "marker"


class RoadType(str, Enum):
    PATH = "path"
    ROAD = "road"
    HIGHWAY = "highway"


class IconCategory(str, Enum):
    TERRAIN = "terrain"
    LANDMARK = "landmark"
    MARKER = "marker"
    ROAD = "road"


def category_for(value: Any) -> IconCategory:
    """Resolve which icon catalogue a terrain/landmark/road value belongs to."""
    if isinstance(value, TerrainType):
        return IconCategory.TERRAIN
    if isinstance(value, RoadType):
        return IconCategory.ROAD
    if isinstance(value, LandmarkType):
        return IconCategory.MARKER if value is LandmarkType.MARKER else IconCategory.LANDMARK
    text = str(value)
    for enum_cls in (TerrainType, RoadType, LandmarkType):
        try:
            return category_for(enum_cls(text))
        except ValueError:
            continue
    raise InvalidEnumError(f"Unknown icon type {value!r}")


class ViewMode(str, Enum):
    GM = "gm"
    PLAYER = "player"


class RevealMode(str, Enum):
    PERMANENT = "permanent"
    LINE_OF_SIGHT = "lineOfSight"


class BrushShape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"
    DIAMOND = "diamond"


BRUSH_SIZES: Tuple[int, ...] = (1, 3, 5, 7)
BRUSH_SHAPES: Tuple[BrushShape, ...] = tuple(BrushShape)


class MirrorAxis(str, Enum):
    Q = "q"
    R = "r"
    BOTH = "both"


@dataclass(frozen=True, order=True)
class AxialCoordinate:
    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def key(self) -> str:
        return f"{self.q},{self.r}"

    @classmethod
    def from_key(cls, key: str) -> "AxialCoordinate":
        try:
            q_text, r_text = key.split(",")
            return cls(int(q_text), int(r_text))
        except (AttributeError, ValueError):
            raise MapDataError(f"Malformed coordinate key {key!r}") from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AxialCoordinate":
        try:
            return cls(int(data["q"]), int(data["r"]))
        except (KeyError, TypeError, ValueError):
            raise MapDataError(f"Malformed coordinate {data!r}") from None

    def to_dict(self) -> Dict[str, int]:
        return {"q": self.q, "r": self.r}

    def __add__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(self.q + other.q, self.r + other.r)

    def __sub__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(self.q - other.q, self.r - other.r)


@dataclass(frozen=True)
class PixelCoordinate:
    x: float
    y: float


@dataclass(frozen=True)
class MapDimensions:
    """Map size in offset (column, row) space."""

    width: int
    height: int

    def contains(self, hex: AxialCoordinate) -> bool:
        row = hex.r
        col = hex.q + row // 2
        return 0 <= row < self.height and 0 <= col < self.width

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MapDimensions":
        try:
            return cls(int(data["width"]), int(data["height"]))
        except (KeyError, TypeError, ValueError):
            raise MapDataError(f"Malformed map dimensions {data!r}") from None


_CONTENT_FIELDS = ("terrain", "landmark", "name", "description", "gm_notes")
# camelCase names used by saved map documents
_WIRE_NAMES = {"gm_notes": "gmNotes", "is_explored": "isExplored", "is_visible": "isVisible"}


def _optional_enum(enum_cls: Type[E], value: Any) -> Optional[E]:
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise MapDataError(f"Unknown {enum_cls.__name__} {value!r}") from None


@dataclass(frozen=True)
class HexCellContent:
    """The copyable part of a cell; exploration flags are never copied."""

    terrain: Optional[TerrainType] = None
    landmark: Optional[LandmarkType] = None
    name: Optional[str] = None
    description: Optional[str] = None
    gm_notes: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f) in (None, "") for f in _CONTENT_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in _CONTENT_FIELDS:
            value = getattr(self, f)
            if value is None:
                continue
            out[_WIRE_NAMES.get(f, f)] = value.value if isinstance(value, Enum) else value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HexCellContent":
        if not isinstance(data, Mapping):
            raise MapDataError(f"Cell content must be an object, got {type(data).__name__}")
        return cls(
            terrain=_optional_enum(TerrainType, data.get("terrain")),
            landmark=_optional_enum(LandmarkType, data.get("landmark")),
            name=data.get("name"),
            description=data.get("description"),
            gm_notes=data.get("gmNotes", data.get("gm_notes")),
        )


@dataclass(frozen=True)
class HexCell(HexCellContent):
    is_explored: bool = False
    is_visible: bool = False

    def has_feature(self) -> bool:
        return self.terrain is not None or self.landmark is not None

    def content(self) -> HexCellContent:
        return HexCellContent(**{f: getattr(self, f) for f in _CONTENT_FIELDS})

    def with_content(self, content: HexCellContent) -> "HexCell":
        return replace(self, **{f: getattr(content, f) for f in _CONTENT_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["isExplored"] = self.is_explored
        out["isVisible"] = self.is_visible
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HexCell":
        base = HexCellContent.from_dict(data)
        return cls(
            **{f.name: getattr(base, f.name) for f in fields(HexCellContent)},
            is_explored=bool(data.get("isExplored", data.get("is_explored", False))),
            is_visible=bool(data.get("isVisible", data.get("is_visible", False))),
        )


CellMap = Mapping[str, HexCell]


def cells_from_dict(data: Mapping[str, Any]) -> Dict[str, HexCell]:
    """Decode a ``{"q,r": {...}}`` document, normalising every key."""
    cells: Dict[str, HexCell] = {}
    for key, raw in (data or {}).items():
        coord = AxialCoordinate.from_key(key)
        if not isinstance(raw, Mapping):
            raise MapDataError(f"Cell {key!r} must be an object, got {type(raw).__name__}")
        cells[coord.key()] = HexCell.from_dict(raw)
    return cells


def cells_to_dict(cells: CellMap) -> Dict[str, Dict[str, Any]]:
    return {key: cell.to_dict() for key, cell in cells.items()}


@dataclass(frozen=True)
class Pattern:
    """Origin-relative snapshot of cell content.

    ``dimensions`` is the bounding box of the selected region, which may be
    larger than the populated entries in ``cells``.
    """

    cells: Mapping[AxialCoordinate, HexCellContent] = field(default_factory=dict)
    dimensions: MapDimensions = MapDimensions(0, 0)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Tuple[AxialCoordinate, HexCellContent]]:
        for coord in sorted(self.cells):
            yield coord, self.cells[coord]

    def is_empty(self) -> bool:
        return not self.cells

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cells": {coord.key(): content.to_dict() for coord, content in self},
            "dimensions": self.dimensions.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pattern":
        raw_cells = data.get("cells") or {}
        if not isinstance(raw_cells, Mapping):
            raise MapDataError(f"Pattern cells must be an object, got {type(raw_cells).__name__}")
        cells = {
            AxialCoordinate.from_key(key): HexCellContent.from_dict(raw)
            for key, raw in raw_cells.items()
        }
        dims = data.get("dimensions") or {"width": 0, "height": 0}
        return cls(cells=cells, dimensions=MapDimensions.from_dict(dims))


__all__ = [
    "AxialCoordinate",
    "BRUSH_SHAPES",
    "BRUSH_SIZES",
    "BrushShape",
    "CellMap",
    "HexCell",
    "HexCellContent",
    "IconCategory",
    "InvalidEnumError",
    "LandmarkType",
    "MapDataError",
    "MapDimensions",
    "MirrorAxis",
    "Pattern",
    "PixelCoordinate",
    "RevealMode",
    "RoadType",
    "TerrainType",
    "ViewMode",
    "category_for",
    "cells_from_dict",
    "cells_to_dict",
    "coerce_enum",
]
