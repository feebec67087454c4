"""Tests for view-mode visibility and exploration state."""
import itertools

import pytest

from hexcrawl.exploration import (
    ExplorationState,
    clamp_sight_distance,
    compute_visible_hexes,
    hex_visibility,
)
from hexcrawl.map.coordinates import hex_distance
from hexcrawl.models import AxialCoordinate, HexCell, InvalidEnumError, RevealMode, ViewMode


def H(q, r):
    return AxialCoordinate(q, r)


class TestHexVisibility:
    """Test the show/hide decision table."""

    @pytest.mark.parametrize(
        "reveal,explored,visible",
        list(itertools.product(["permanent", "lineOfSight"], [False, True], [False, True])),
    )
    def test_gm_sees_everything(self, reveal, explored, visible):
        v = hex_visibility("gm", reveal, explored, visible)
        assert v.should_show is True
        assert v.is_currently_visible is True
        assert v.is_explored is explored

    @pytest.mark.parametrize("explored,visible", list(itertools.product([False, True], [False, True])))
    def test_player_permanent_follows_explored(self, explored, visible):
        v = hex_visibility(ViewMode.PLAYER, RevealMode.PERMANENT, explored, visible)
        assert v.should_show is explored
        assert v.is_explored is explored
        assert v.is_currently_visible is visible

    @pytest.mark.parametrize("explored,visible", list(itertools.product([False, True], [False, True])))
    def test_player_line_of_sight_follows_current_sight(self, explored, visible):
        v = hex_visibility(ViewMode.PLAYER, RevealMode.LINE_OF_SIGHT, explored, visible)
        assert v.should_show is visible
        assert v.is_explored is explored
        assert v.is_currently_visible is visible

    def test_unknown_mode_rejected(self):
        with pytest.raises(InvalidEnumError):
            hex_visibility("spectator", "permanent", True, True)
        with pytest.raises(InvalidEnumError):
            hex_visibility("player", "fog", True, True)


class TestSightDistance:
    """Test sight distance handling."""

    @pytest.mark.parametrize("value,expected", [(-3, 1), (0, 1), (1, 1), (2, 2), (10, 10), (25, 10)])
    def test_clamp(self, value, expected):
        assert clamp_sight_distance(value) == expected

    def test_visible_set_is_union_of_ranges(self):
        visible = compute_visible_hexes([H(0, 0), H(10, 0)], 1)
        assert len(visible) == 14
        assert "0,0" in visible and "10,0" in visible

    def test_overlapping_ranges_are_not_double_counted(self):
        visible = compute_visible_hexes([H(0, 0), H(1, 0)], 1)
        assert len(visible) == 10

    def test_no_players_sees_nothing(self):
        assert compute_visible_hexes([], 3) == frozenset()


class TestExplorationState:
    """Test the explored/visible sets."""

    def test_update_marks_range_explored(self):
        state = ExplorationState().update_visibility([H(0, 0)], 2)
        assert len(state.visible) == 19
        assert state.explored == state.visible
        assert state.is_explored(H(2, 0))
        assert not state.is_explored(H(3, 0))

    def test_explored_only_grows(self):
        state = ExplorationState()
        previous = state.explored
        for pos in [H(0, 0), H(3, 0), H(6, -2), H(6, -2), H(0, 0)]:
            state = state.update_visibility([pos], 2)
            assert previous <= state.explored
            assert state.visible <= state.explored
            previous = state.explored

    def test_visible_is_recomputed_from_scratch(self):
        state = ExplorationState().update_visibility([H(0, 0)], 2)
        state = state.update_visibility([H(5, 0)], 2)
        assert not state.is_visible(H(0, 0))
        assert state.is_explored(H(0, 0))
        assert all(hex_distance(H(5, 0), AxialCoordinate.from_key(k)) <= 2 for k in state.visible)

    def test_zero_players_clears_visible_only(self):
        state = ExplorationState().update_visibility([H(0, 0)], 1)
        cleared = state.update_visibility([], 1)
        assert cleared.visible == frozenset()
        assert cleared.explored == state.explored

    def test_history_records_first_exploration_once(self):
        state = ExplorationState().update_visibility([H(0, 0)], 1)
        state = state.update_visibility([H(0, 0)], 1)
        assert len(state.history) == 7
        assert len(set(state.history)) == 7

    def test_explore_and_unexplore(self):
        state = ExplorationState().explore(H(4, 4))
        assert state.is_explored(H(4, 4))
        assert state.history == ("4,4",)
        state = state.unexplore(H(4, 4))
        assert not state.is_explored(H(4, 4))
        assert state.history == ()

    def test_reset_clears_everything(self):
        state = ExplorationState().update_visibility([H(0, 0)], 3).reset()
        assert state == ExplorationState()

    def test_states_are_immutable_snapshots(self):
        before = ExplorationState()
        after = before.update_visibility([H(0, 0)], 1)
        assert before.explored == frozenset()
        assert after is not before

    def test_visibility_for(self):
        state = ExplorationState().update_visibility([H(0, 0)], 1)
        state = state.update_visibility([H(6, 0)], 1)
        remembered = state.visibility_for(H(0, 0), "player", "permanent")
        assert remembered.should_show and not remembered.is_currently_visible
        hidden = state.visibility_for(H(0, 0), "player", "lineOfSight")
        assert not hidden.should_show

    def test_stats(self):
        cells = {f"{q},0": HexCell() for q in range(4)}
        state = ExplorationState().explore_many([H(0, 0), H(1, 0)])
        stats = state.stats(cells)
        assert stats.total_cells == 4
        assert stats.explored_cells == 2
        assert stats.exploration_percentage == pytest.approx(50.0)

    def test_stats_without_cells(self):
        assert ExplorationState().stats().exploration_percentage == 0.0
