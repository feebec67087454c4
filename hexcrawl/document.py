"""Map documents: the JSON/YAML payload the command line and server accept.

A document bundles the inputs the engine consumes from its collaborators::

    {
      "dimensions": {"width": 10, "height": 10},
      "cells": {"0,0": {"terrain": "plains", "isExplored": true}},
      "playerPositions": [{"q": 0, "r": 0}],
      "sightDistance": 2,
      "revealMode": "permanent",
      "exploredHexes": ["0,0"]
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

import yaml

from .exploration import DEFAULT_SIGHT_DISTANCE, ExplorationState
from .models import (
    AxialCoordinate,
    HexCell,
    MapDataError,
    MapDimensions,
    RevealMode,
    cells_from_dict,
    cells_to_dict,
    coerce_enum,
)


def _sight_distance(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MapDataError(f"Sight distance must be an integer, got {value!r}") from None


@dataclass
class MapDocument:
    """Decoded map document.

    ``sight_distance`` is kept as written so validation can flag it; callers
    clamp it before computing visibility.
    """

    dimensions: MapDimensions
    cells: Dict[str, HexCell] = field(default_factory=dict)
    player_positions: List[AxialCoordinate] = field(default_factory=list)
    sight_distance: int = DEFAULT_SIGHT_DISTANCE
    reveal_mode: RevealMode = RevealMode.PERMANENT
    exploration: ExplorationState = field(default_factory=ExplorationState)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MapDocument":
        if not isinstance(data, Mapping):
            raise MapDataError(f"Map document must be an object, got {type(data).__name__}")
        dims = data.get("dimensions")
        if dims is None:
            raise MapDataError("Map document is missing 'dimensions'")
        positions = [AxialCoordinate.from_dict(p) for p in data.get("playerPositions") or []]
        explored = frozenset(
            AxialCoordinate.from_key(k).key() for k in data.get("exploredHexes") or []
        )
        visible = frozenset(
            AxialCoordinate.from_key(k).key() for k in data.get("visibleHexes") or []
        )
        return cls(
            dimensions=MapDimensions.from_dict(dims),
            cells=cells_from_dict(data.get("cells") or {}),
            player_positions=positions,
            sight_distance=_sight_distance(data.get("sightDistance", DEFAULT_SIGHT_DISTANCE)),
            reveal_mode=coerce_enum(RevealMode, data.get("revealMode", RevealMode.PERMANENT.value)),
            exploration=ExplorationState(explored=explored, visible=visible),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimensions": self.dimensions.to_dict(),
            "cells": cells_to_dict(self.cells),
            "playerPositions": [p.to_dict() for p in self.player_positions],
            "sightDistance": self.sight_distance,
            "revealMode": self.reveal_mode.value,
            "exploredHexes": sorted(self.exploration.explored),
            "visibleHexes": sorted(self.exploration.visible),
        }


def load_document(path: str) -> MapDocument:
    """Read a map document from a ``.json`` or YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        data = json.loads(text) if path.endswith(".json") else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MapDataError(f"Cannot parse map document {path}: {exc}") from exc
    return MapDocument.from_dict(data or {})


__all__ = ["MapDocument", "load_document"]
