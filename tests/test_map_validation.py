"""Tests for map document validation."""
from hexcrawl.map.validation import (
    validate_all,
    validate_cells,
    validate_dimensions,
    validate_player_positions,
)
from hexcrawl.models import AxialCoordinate, HexCell, MapDimensions


def H(q, r):
    return AxialCoordinate(q, r)


DIMS = MapDimensions(10, 10)


class TestValidation:
    """Test map document checks."""

    def test_valid_map(self):
        cells = {"0,0": HexCell(), "-1,2": HexCell()}
        assert validate_all(cells, DIMS, [H(0, 0)], 2) == []

    def test_bad_dimensions_short_circuit(self):
        errors = validate_all({"99,99": HexCell()}, MapDimensions(0, -1))
        assert len(errors) == 2

    def test_dimensions(self):
        assert validate_dimensions(DIMS) == []
        assert validate_dimensions(MapDimensions(0, 5))

    def test_cell_outside_map(self):
        warnings = validate_cells({"10,0": HexCell()}, DIMS)
        assert len(warnings) == 1
        assert "outside" in warnings[0]

    def test_non_canonical_key(self):
        warnings = validate_cells({"01,2": HexCell()}, DIMS)
        assert any("not canonical" in w for w in warnings)

    def test_malformed_key(self):
        warnings = validate_cells({"a,b": HexCell()}, DIMS)
        assert len(warnings) == 1

    def test_player_positions(self):
        warnings = validate_player_positions([H(0, 0), H(0, 0), H(-5, 0)], DIMS, 2)
        assert len(warnings) == 2

    def test_sight_out_of_range(self):
        warnings = validate_player_positions([], DIMS, 11)
        assert len(warnings) == 1
        assert "clamped" in warnings[0]
