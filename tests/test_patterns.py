"""Tests for copy/paste patterns and their transforms."""
import pytest

from hexcrawl.map.coordinates import hexes_in_rectangle
from hexcrawl.map.patterns import (
    apply_to_cells,
    capture,
    mirror,
    mirror_coordinate,
    paste,
    preview_paste,
    rotate,
    rotate_coordinate,
    rotation_steps,
    scale,
    transform,
)
from hexcrawl.models import (
    AxialCoordinate,
    HexCell,
    HexCellContent,
    InvalidEnumError,
    LandmarkType,
    MapDimensions,
    Pattern,
    TerrainType,
)


def H(q, r):
    return AxialCoordinate(q, r)


@pytest.fixture
def cells():
    return {
        "0,0": HexCell(terrain=TerrainType.MOUNTAINS, is_explored=True),
        "1,0": HexCell(terrain=TerrainType.HILLS, name="Foothills"),
        "2,1": HexCell(landmark=LandmarkType.TOWER, gm_notes="Bandits"),
        "1,1": HexCell(is_visible=True),
    }


@pytest.fixture
def line():
    content = HexCellContent(terrain=TerrainType.WATER)
    return Pattern(
        cells={H(0, 0): content, H(1, 0): content, H(2, 0): content},
        dimensions=MapDimensions(3, 1),
    )


class TestCapture:
    """Test capturing a selection."""

    def test_sparse_entries(self, cells):
        pattern = capture(hexes_in_rectangle(H(0, 0), H(2, 1)), cells)
        assert set(pattern.cells) == {H(0, 0), H(1, 0), H(2, 1)}
        assert pattern.dimensions == MapDimensions(3, 2)

    def test_exploration_flags_are_not_copied(self, cells):
        pattern = capture(hexes_in_rectangle(H(0, 0), H(2, 1)), cells)
        assert pattern.cells[H(0, 0)] == HexCellContent(terrain=TerrainType.MOUNTAINS)
        assert pattern.cells[H(2, 1)].gm_notes == "Bandits"

    def test_relative_to_origin(self, cells):
        pattern = capture(hexes_in_rectangle(H(1, 0), H(2, 1)), cells)
        assert set(pattern.cells) == {H(0, 0), H(1, 1)}

    def test_explicit_origin(self, cells):
        pattern = capture([H(1, 0)], cells, origin=H(3, 3))
        assert set(pattern.cells) == {H(-2, -3)}

    def test_empty_selection(self, cells):
        pattern = capture([], cells)
        assert pattern.is_empty()
        assert pattern.dimensions == MapDimensions(0, 0)


class TestPaste:
    """Test paste placement and preview."""

    def test_round_trip(self, cells):
        selection = hexes_in_rectangle(H(0, 0), H(2, 1))
        pattern = capture(selection, cells)
        for coord, content in paste(pattern, H(0, 0)):
            assert cells[coord.key()].content() == content

    def test_paste_offsets_by_target(self, line):
        assert [c for c, _ in paste(line, H(4, 2))] == [H(4, 2), H(5, 2), H(6, 2)]

    def test_paste_keeps_out_of_bounds(self, line):
        assert len(paste(line, H(-10, -10))) == 3

    def test_preview_filters_bounds(self, line):
        assert preview_paste(line, H(8, 0), MapDimensions(10, 10)) == [H(8, 0), H(9, 0)]

    def test_apply_to_cells(self, cells, line):
        placements = paste(line, H(0, 0))
        updated = apply_to_cells(placements, cells, MapDimensions(2, 2))
        assert updated["0,0"].terrain is TerrainType.WATER
        assert updated["0,0"].is_explored
        assert updated["1,0"].name is None
        assert "2,0" not in updated
        assert cells["0,0"].terrain is TerrainType.MOUNTAINS


class TestRotation:
    """Test 60 degree rotation steps."""

    def test_single_step(self):
        assert rotate_coordinate(H(1, 0), 1) == H(0, 1)
        assert rotate_coordinate(H(1, 0), 3) == H(-1, 0)

    def test_six_steps_is_identity(self, line):
        pattern = line
        for _ in range(6):
            pattern = rotate(pattern, 60)
        assert pattern.cells == line.cells

    def test_full_turn_equals_none(self, line):
        assert rotate(line, 360).cells == rotate(line, 0).cells == line.cells

    def test_preserves_distance_from_origin(self, line):
        rotated = rotate(line, 120)
        assert sorted(max(abs(c.q), abs(c.r), abs(c.s)) for c in rotated.cells) == [0, 1, 2]

    def test_keeps_dimensions(self, line):
        assert rotate(line, 180).dimensions == line.dimensions

    @pytest.mark.parametrize("angle", [45, 90, -60, 420])
    def test_invalid_angle(self, angle):
        with pytest.raises(InvalidEnumError):
            rotation_steps(angle)


class TestMirror:
    """Test mirroring across axes."""

    @pytest.mark.parametrize("axis", ["q", "r", "both"])
    def test_involution(self, axis):
        for q in range(-3, 4):
            for r in range(-3, 4):
                coord = H(q, r)
                assert mirror_coordinate(mirror_coordinate(coord, axis), axis) == coord

    def test_axes(self):
        assert mirror_coordinate(H(2, -1), "q") == H(2, -1)
        assert mirror_coordinate(H(1, 1), "q") == H(1, -2)
        assert mirror_coordinate(H(1, 1), "r") == H(-2, 1)
        assert mirror_coordinate(H(1, 1), "both") == H(-1, -1)

    def test_pattern_mirror(self, line):
        assert set(mirror(line, "both").cells) == {H(0, 0), H(-1, 0), H(-2, 0)}

    def test_invalid_axis(self, line):
        with pytest.raises(InvalidEnumError):
            mirror(line, "diagonal")


class TestScale:
    """Test scaling patterns."""

    def test_double(self, line):
        scaled = scale(line, 2)
        assert set(scaled.cells) == {H(0, 0), H(2, 0), H(4, 0)}
        assert scaled.dimensions == MapDimensions(6, 2)

    def test_identity(self, line):
        assert scale(line, 1) is line

    def test_collisions_keep_first_entry(self):
        pattern = Pattern(cells={
            H(0, 0): HexCellContent(terrain=TerrainType.PLAINS),
            H(1, 0): HexCellContent(terrain=TerrainType.DESERT),
        })
        scaled = scale(pattern, 0.5)
        assert scaled.cells == {H(0, 0): HexCellContent(terrain=TerrainType.PLAINS)}

    @pytest.mark.parametrize("factor", [0, -1])
    def test_non_positive_factor(self, line, factor):
        with pytest.raises(ValueError):
            scale(line, factor)


class TestTransform:
    """Test the combined transform."""

    def test_mirror_then_rotate(self, line):
        combined = transform(line, rotation=60, mirror_axis="q")
        assert combined.cells == rotate(mirror(line, "q"), 60).cells

    def test_defaults_are_identity(self, line):
        assert transform(line).cells == line.cells

    def test_scale_applied_last(self, line):
        combined = transform(line, rotation=180, scale_factor=2)
        assert set(combined.cells) == {H(0, 0), H(-2, 0), H(-4, 0)}
