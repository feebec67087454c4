"""Tests for flood fill region discovery and application."""
import dataclasses

import pytest

from hexcrawl.map.coordinates import hex_neighbors, hexes_in_range, rectangular_grid
from hexcrawl.map.flood_fill import FillMatcher, apply_flood_fill, flood_fill, flood_fill_preview
from hexcrawl.models import AxialCoordinate, HexCell, LandmarkType, MapDimensions, TerrainType


def H(q, r):
    return AxialCoordinate(q, r)


@pytest.fixture
def lake_map():
    """A 7-hex water lake surrounded by plains, one village on the shore."""
    cells = {}
    for hex in hexes_in_range(H(5, 5), 3):
        cells[hex.key()] = HexCell(terrain=TerrainType.PLAINS)
    for hex in hexes_in_range(H(5, 5), 1):
        cells[hex.key()] = HexCell(terrain=TerrainType.WATER, is_explored=True)
    cells["7,5"] = HexCell(terrain=TerrainType.PLAINS, landmark=LandmarkType.VILLAGE)
    return cells


class TestFloodFill:
    """Test connected region discovery."""

    def test_finds_lake(self, lake_map):
        region = flood_fill(H(5, 5), lake_map)
        assert set(region) == set(hexes_in_range(H(5, 5), 1))
        assert region[0] == H(5, 5)

    def test_region_is_connected_and_matching(self, lake_map):
        region = flood_fill(H(4, 5), lake_map)
        members = set(region)
        for hex in region:
            assert lake_map[hex.key()].terrain is TerrainType.WATER
            if hex != region[0]:
                assert any(n in members for n in hex_neighbors(hex))

    def test_idempotent(self, lake_map):
        region = flood_fill(H(5, 5), lake_map)
        for hex in region:
            assert set(flood_fill(hex, lake_map)) == set(region)

    def test_landmark_splits_region(self, lake_map):
        plains = flood_fill(H(2, 5), lake_map)
        assert H(7, 5) not in plains
        assert flood_fill(H(7, 5), lake_map) == [H(7, 5)]

    def test_explicit_matcher_that_misses_start(self, lake_map):
        matcher = FillMatcher(terrain=TerrainType.DESERT)
        assert flood_fill(H(5, 5), lake_map, matcher) == []

    def test_matcher_is_frozen(self, lake_map):
        matcher = FillMatcher.of(lake_map["5,5"])
        with pytest.raises(dataclasses.FrozenInstanceError):
            matcher.terrain = TerrainType.PLAINS

    def test_empty_matcher_without_bounds_walks_known_cells(self):
        cells = {"0,0": HexCell(), "1,0": HexCell(), "3,0": HexCell()}
        assert set(flood_fill(H(0, 0), cells)) == {H(0, 0), H(1, 0)}

    def test_empty_region_respects_dimensions(self):
        dims = MapDimensions(4, 3)
        region = flood_fill(H(0, 0), {}, dimensions=dims)
        assert set(region) == set(rectangular_grid(dims))

    def test_start_outside_dimensions(self):
        assert flood_fill(H(-5, 0), {}, dimensions=MapDimensions(4, 4)) == []

    def test_max_hexes_caps_region(self):
        region = flood_fill(H(0, 0), {}, max_hexes=10, dimensions=MapDimensions(20, 20))
        assert len(region) == 10
        assert region[0] == H(0, 0)


class TestFloodFillPreview:
    """Test the confirmation preview."""

    def test_small_region(self, lake_map):
        preview = flood_fill_preview(H(5, 5), lake_map)
        assert preview.count == 7
        assert not preview.is_large_operation

    def test_large_region_is_flagged_and_capped(self):
        preview = flood_fill_preview(H(0, 0), {}, dimensions=MapDimensions(30, 30))
        assert preview.is_large_operation
        assert preview.count == 100
        assert len(preview.hexes) == 100

    def test_threshold_is_configurable(self, lake_map):
        preview = flood_fill_preview(H(5, 5), lake_map, large_threshold=5)
        assert preview.is_large_operation


class TestApplyFloodFill:
    """Test painting a region."""

    def test_paints_and_keeps_flags(self, lake_map):
        region = flood_fill(H(5, 5), lake_map)
        updated = apply_flood_fill(region, lake_map, terrain=TerrainType.SWAMPS)
        for hex in region:
            assert updated[hex.key()].terrain is TerrainType.SWAMPS
            assert updated[hex.key()].is_explored
        assert lake_map["5,5"].terrain is TerrainType.WATER

    def test_landmark_only_keeps_terrain(self, lake_map):
        updated = apply_flood_fill([H(5, 5)], lake_map, landmark=LandmarkType.TOWER)
        assert updated["5,5"].terrain is TerrainType.WATER
        assert updated["5,5"].landmark is LandmarkType.TOWER

    def test_clear_existing(self, lake_map):
        updated = apply_flood_fill([H(7, 5)], lake_map, clear_existing=True)
        assert updated["7,5"].is_empty()

    def test_creates_missing_cells(self):
        updated = apply_flood_fill([H(1, 1)], {}, terrain=TerrainType.HILLS)
        assert updated == {"1,1": HexCell(terrain=TerrainType.HILLS)}
