"""Tests for the tile and grid model."""

import numpy as np
import pytest

from puzzlekit.grid import PuzzleConfigError, PuzzleGrid
from puzzlekit.tile import Tile


def make_tiles(grid_size: int) -> list[Tile]:
    """Tiles at identity positions with small array payloads."""
    return [
        Tile(correct_index=i, payload=np.full((4, 4, 3), i, dtype=np.uint8))
        for i in range(grid_size**2)
    ]


@pytest.fixture
def solved_grid():
    """A 3x3 grid with every tile in its correct slot."""
    grid = PuzzleGrid(grid_size=3, seed=7)
    grid.set_tiles(make_tiles(3))
    return grid


def assert_permutation(grid: PuzzleGrid) -> None:
    current = [tile.current_index for tile in grid.tiles]
    assert sorted(current) == list(range(grid.total_tiles))
    # Storage position and current index move together
    assert current == list(range(grid.total_tiles))


class TestTile:
    """Tests for the Tile dataclass."""

    def test_current_defaults_to_correct(self):
        tile = Tile(correct_index=5)
        assert tile.current_index == 5
        assert tile.is_locked

    def test_lock_state_follows_current_index(self):
        tile = Tile(correct_index=2, current_index=3)
        assert not tile.is_locked

        tile.current_index = 2
        assert tile.is_locked

    def test_identity_equality(self):
        """Tiles with identical fields are still different pieces."""
        payload = np.zeros((2, 2))
        assert Tile(0, payload) != Tile(0, payload)


class TestSetTiles:
    """Tests for grid population."""

    def test_grid_size_too_small(self):
        with pytest.raises(PuzzleConfigError):
            PuzzleGrid(grid_size=1)

    def test_wrong_tile_count(self):
        grid = PuzzleGrid(grid_size=3)
        with pytest.raises(PuzzleConfigError, match="Expected 9 tiles"):
            grid.set_tiles(make_tiles(2))

    def test_duplicate_correct_indices(self):
        grid = PuzzleGrid(grid_size=2)
        tiles = [Tile(0, current_index=0), Tile(1, current_index=1),
                 Tile(1, current_index=2), Tile(3, current_index=3)]
        with pytest.raises(PuzzleConfigError, match="permutation"):
            grid.set_tiles(tiles)

    def test_current_index_out_of_sync(self):
        grid = PuzzleGrid(grid_size=2)
        tiles = make_tiles(2)
        tiles[0], tiles[1] = tiles[1], tiles[0]
        with pytest.raises(PuzzleConfigError, match="stored at"):
            grid.set_tiles(tiles)

    def test_failed_validation_keeps_previous_tiles(self, solved_grid):
        previous = solved_grid.tiles
        with pytest.raises(PuzzleConfigError):
            solved_grid.set_tiles(make_tiles(2))
        assert all(a is b for a, b in zip(previous, solved_grid.tiles))

    def test_replaces_previous_tiles(self, solved_grid):
        fresh = make_tiles(3)
        solved_grid.set_tiles(fresh)
        assert all(a is b for a, b in zip(fresh, solved_grid.tiles))


class TestSwap:
    """Tests for the swap rules."""

    def test_locked_tiles_do_not_move(self, solved_grid):
        assert solved_grid.swap(0, 1, allow_locked=False) is False

        assert solved_grid.tile_at(0).correct_index == 0
        assert solved_grid.tile_at(0).current_index == 0
        assert solved_grid.tile_at(1).current_index == 1
        assert solved_grid.tile_at(0).is_locked
        assert solved_grid.tile_at(1).is_locked

    def test_allow_locked_swaps(self, solved_grid):
        assert solved_grid.swap(0, 1, allow_locked=True) is True

        assert solved_grid.tile_at(0).correct_index == 1
        assert solved_grid.tile_at(1).correct_index == 0
        assert solved_grid.tile_at(0).current_index == 0
        assert not solved_grid.tile_at(0).is_locked
        assert not solved_grid.is_complete()
        assert_permutation(solved_grid)

    def test_one_locked_tile_blocks_swap(self, solved_grid):
        solved_grid.swap(0, 1, allow_locked=True)
        # Slot 0 and 1 are now unlocked, slot 2 is locked
        assert solved_grid.swap(0, 2, allow_locked=False) is False
        assert solved_grid.arrangement()[:3] == [1, 0, 2]

    def test_swapping_back_relocks(self, solved_grid):
        solved_grid.swap(3, 8, allow_locked=True)
        assert solved_grid.count_locked() == 7

        assert solved_grid.swap(3, 8, allow_locked=False) is True
        assert solved_grid.count_locked() == 9
        assert solved_grid.is_complete()

    def test_out_of_range(self, solved_grid):
        with pytest.raises(IndexError):
            solved_grid.swap(0, 9, allow_locked=True)

    def test_negative_index_rejected(self, solved_grid):
        """Negative slots do not wrap around to the end of the board."""
        with pytest.raises(IndexError):
            solved_grid.swap(-1, 0, allow_locked=True)
        with pytest.raises(IndexError):
            solved_grid.swap(0, -9, allow_locked=True)

        assert solved_grid.is_complete()
        assert_permutation(solved_grid)

    def test_permutation_invariant_over_random_swaps(self, solved_grid):
        rng = np.random.default_rng(0)
        for _ in range(200):
            a, b = rng.integers(0, 9, size=2)
            solved_grid.swap(int(a), int(b), allow_locked=bool(rng.integers(0, 2)))
            assert_permutation(solved_grid)


class TestCompletion:
    """Tests for completion detection and queries."""

    def test_identity_is_complete_repeatedly(self, solved_grid):
        before = solved_grid.arrangement()
        assert solved_grid.is_complete()
        assert solved_grid.is_complete()
        assert solved_grid.arrangement() == before

    def test_empty_grid_is_not_complete(self):
        assert not PuzzleGrid(grid_size=3).is_complete()

    def test_index_of(self, solved_grid):
        tile = solved_grid.tile_at(4)
        assert solved_grid.index_of(tile) == 4

        with pytest.raises(ValueError):
            solved_grid.index_of(Tile(4))

    def test_arrangement(self, solved_grid):
        solved_grid.swap(0, 8, allow_locked=True)
        arrangement = solved_grid.arrangement()

        assert arrangement[0] == 8
        assert arrangement[8] == 0
        assert arrangement[1:8] == list(range(1, 8))


class TestScenario:
    """End-to-end swap behaviour on a 3x3 grid."""

    def test_locked_then_shuffled(self, solved_grid):
        assert solved_grid.swap(0, 1, allow_locked=False) is False
        assert solved_grid.tile_at(0).is_locked and solved_grid.tile_at(1).is_locked

        assert solved_grid.swap(1, 4, allow_locked=False) is False
        assert solved_grid.tile_at(1).current_index == 1
        assert solved_grid.tile_at(4).current_index == 4

        solved_grid.shuffle_ensuring_no_initial_lock()
        assert not solved_grid.is_complete()

        first, second = solved_grid.tile_at(0), solved_grid.tile_at(1)
        assert solved_grid.swap(0, 1, allow_locked=False) is True
        assert solved_grid.tile_at(0) is second
        assert solved_grid.tile_at(1) is first
        assert second.current_index == 0
        assert first.current_index == 1
        assert_permutation(solved_grid)
        assert solved_grid.is_complete() == all(t.is_locked for t in solved_grid.tiles)
