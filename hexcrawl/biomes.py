"""Seeded procedural biome generation.

The generator fills a width x height block with weighted terrain and the
occasional landmark and returns it as a ``Pattern`` so it can be previewed,
transformed and pasted like any copied selection.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Tuple, TypeVar

from .map.coordinates import rectangular_grid
from .models import (
    AxialCoordinate,
    HexCellContent,
    LandmarkType,
    MapDimensions,
    Pattern,
    TerrainType,
    coerce_enum,
)


class BiomeType(str, Enum):
    FOREST = "forest"
    MOUNTAIN = "mountain"
    COASTAL = "coastal"
    DESERT = "desert"
    SWAMP = "swamp"
    MIXED = "mixed"


T = TypeVar("T")

TERRAIN_WEIGHTS: Dict[BiomeType, Dict[TerrainType, float]] = {
    BiomeType.FOREST: {
        TerrainType.PLAINS: 0.6,
        TerrainType.SWAMPS: 0.2,
        TerrainType.WATER: 0.15,
        TerrainType.MOUNTAINS: 0.05,
    },
    BiomeType.MOUNTAIN: {
        TerrainType.MOUNTAINS: 0.7,
        TerrainType.PLAINS: 0.2,
        TerrainType.WATER: 0.1,
    },
    BiomeType.COASTAL: {
        TerrainType.WATER: 0.4,
        TerrainType.PLAINS: 0.3,
        TerrainType.SWAMPS: 0.2,
        TerrainType.MOUNTAINS: 0.1,
    },
    BiomeType.DESERT: {
        TerrainType.DESERT: 0.8,
        TerrainType.MOUNTAINS: 0.15,
        TerrainType.WATER: 0.05,
    },
    BiomeType.SWAMP: {
        TerrainType.SWAMPS: 0.6,
        TerrainType.WATER: 0.3,
        TerrainType.PLAINS: 0.1,
    },
    BiomeType.MIXED: {
        TerrainType.PLAINS: 0.3,
        TerrainType.MOUNTAINS: 0.2,
        TerrainType.WATER: 0.2,
        TerrainType.SWAMPS: 0.15,
        TerrainType.DESERT: 0.15,
    },
}

_BASE_LANDMARK_WEIGHTS: Dict[LandmarkType, float] = {
    LandmarkType.VILLAGE: 0.2,
    LandmarkType.HAMLET: 0.3,
    LandmarkType.TOWN: 0.3,
    LandmarkType.CITY: 0.1,
    LandmarkType.TOWER: 0.1,
    LandmarkType.MARKER: 0.5,
}

_LANDMARK_ADJUSTMENTS: Dict[BiomeType, Dict[LandmarkType, float]] = {
    BiomeType.MOUNTAIN: {
        LandmarkType.TOWER: 0.3,
        LandmarkType.TOWN: 0.1,
        LandmarkType.CITY: 0.05,
        LandmarkType.MARKER: 0.55,
    },
    BiomeType.COASTAL: {
        LandmarkType.TOWN: 0.4,
        LandmarkType.CITY: 0.2,
    },
    BiomeType.DESERT: {
        LandmarkType.TOWER: 0.2,
        LandmarkType.TOWN: 0.1,
        LandmarkType.MARKER: 0.6,
    },
}


def landmark_weights(biome: BiomeType) -> Dict[LandmarkType, float]:
    weights = dict(_BASE_LANDMARK_WEIGHTS)
    weights.update(_LANDMARK_ADJUSTMENTS.get(biome, {}))
    return weights


@dataclass(frozen=True)
class BiomeConfig:
    biome_type: BiomeType = BiomeType.MIXED
    density: float = 0.8
    # fraction of cells re-rolled from the mixed palette
    variation: float = 0.0
    landmark_chance: float = 0.05
    seed: Optional[int] = None
    terrain_weights: Mapping[TerrainType, float] = field(default_factory=dict)
    landmark_weights: Mapping[LandmarkType, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "biome_type", coerce_enum(BiomeType, self.biome_type))
        for name in ("density", "variation", "landmark_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value!r}")


def _pick(rng: random.Random, weights: Mapping[T, float]) -> Optional[T]:
    items: Sequence[Tuple[T, float]] = [(k, w) for k, w in weights.items() if w > 0]
    total = sum(w for _, w in items)
    if total <= 0:
        return None
    roll = rng.random() * total
    for item, weight in items:
        roll -= weight
        if roll < 0:
            return item
    return items[-1][0]


def generate_biome(dimensions: MapDimensions, config: BiomeConfig = BiomeConfig()) -> Pattern:
    """Generate terrain for a width x height block.

    The same seed and config always produce the same pattern. Coordinates
    are relative to the block's top-left hex.

    Args:
        dimensions: Block size in offset space
        config: Biome type, densities and optional weight overrides

    Returns:
        Pattern whose dimensions equal ``dimensions``
    """
    rng = random.Random(config.seed)
    terrain_weights = dict(TERRAIN_WEIGHTS[config.biome_type])
    terrain_weights.update(config.terrain_weights)
    landmarks = landmark_weights(config.biome_type)
    landmarks.update(config.landmark_weights)
    mixed = TERRAIN_WEIGHTS[BiomeType.MIXED]

    entries: Dict[AxialCoordinate, HexCellContent] = {}
    for coord in rectangular_grid(dimensions):
        if rng.random() >= config.density:
            continue
        palette = mixed if rng.random() < config.variation else terrain_weights
        terrain = _pick(rng, palette)
        landmark = _pick(rng, landmarks) if rng.random() < config.landmark_chance else None
        content = HexCellContent(terrain=terrain, landmark=landmark)
        if not content.is_empty():
            entries[coord] = content
    return Pattern(cells=entries, dimensions=dimensions)


__all__ = [
    "BiomeConfig",
    "BiomeType",
    "TERRAIN_WEIGHTS",
    "generate_biome",
    "landmark_weights",
]
