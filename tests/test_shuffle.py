"""Tests for the shuffle strategies."""

import random

import pytest

from puzzlekit.grid import PuzzleGrid
from puzzlekit.shuffle import shuffle_ensuring_no_initial_lock, shuffle_unlocked_only
from puzzlekit.tile import Tile


def make_grid(grid_size: int, seed=None) -> PuzzleGrid:
    grid = PuzzleGrid(grid_size=grid_size, seed=seed)
    grid.set_tiles([Tile(correct_index=i) for i in range(grid_size**2)])
    return grid


class TestFullShuffle:
    """Tests for the shuffle that leaves no tile in place."""

    @pytest.mark.parametrize("grid_size", [2, 3, 4, 6, 10])
    def test_no_tile_starts_locked(self, grid_size):
        grid = make_grid(grid_size, seed=grid_size)

        attempts = grid.shuffle_ensuring_no_initial_lock()

        assert attempts >= 1
        assert not grid.is_complete()
        assert grid.count_locked() == 0
        assert not any(tile.is_locked for tile in grid.tiles)

    def test_keeps_positions_in_sync(self):
        grid = make_grid(4, seed=1)
        for _ in range(20):
            grid.shuffle_ensuring_no_initial_lock()
            assert [t.current_index for t in grid.tiles] == list(range(16))
            assert sorted(grid.arrangement()) == list(range(16))

    def test_two_by_two_is_derangement(self):
        grid = make_grid(2, seed=3)
        grid.shuffle_ensuring_no_initial_lock()
        assert all(correct != slot for slot, correct in enumerate(grid.arrangement()))

    def test_reproducible_with_seed(self):
        grid1 = make_grid(4, seed=123)
        grid2 = make_grid(4, seed=123)

        grid1.shuffle_ensuring_no_initial_lock()
        grid2.shuffle_ensuring_no_initial_lock()

        assert grid1.arrangement() == grid2.arrangement()

    def test_empty_is_noop(self):
        assert shuffle_ensuring_no_initial_lock([], random.Random(0)) == 0

    def test_single_tile_rejected(self):
        with pytest.raises(ValueError):
            shuffle_ensuring_no_initial_lock([Tile(0)], random.Random(0))


class TestUnlockedShuffle:
    """Tests for the shuffle restricted to unlocked tiles."""

    def test_locked_tiles_stay_put(self):
        grid = make_grid(3, seed=5)
        # Unlock slots 0, 1, 2 and 5 by rotating their tiles
        grid.swap(0, 1, allow_locked=True)
        grid.swap(2, 5, allow_locked=True)
        locked_before = {slot: grid.tile_at(slot) for slot in (3, 4, 6, 7, 8)}

        for _ in range(25):
            moved = grid.shuffle_unlocked_only()
            for slot, tile in locked_before.items():
                assert grid.tile_at(slot) is tile
                assert tile.is_locked
            assert moved <= 4

    def test_only_unlocked_slots_are_reused(self):
        grid = make_grid(3, seed=11)
        grid.swap(0, 8, allow_locked=True)
        grid.swap(1, 7, allow_locked=True)

        grid.shuffle_unlocked_only()

        assert {grid.tile_at(s).correct_index for s in (0, 1, 7, 8)} == {0, 1, 7, 8}
        assert [t.current_index for t in grid.tiles] == list(range(9))

    def test_may_relock_tiles(self):
        """Unlocked tiles are not kept away from their correct slot."""
        relocked = False
        for seed in range(50):
            grid = make_grid(2, seed=seed)
            grid.swap(0, 1, allow_locked=True)
            grid.shuffle_unlocked_only()
            if grid.is_complete():
                relocked = True
                break
        assert relocked

    def test_all_locked_is_noop(self):
        grid = make_grid(3, seed=0)
        assert grid.shuffle_unlocked_only() == 0
        assert grid.is_complete()

    def test_empty_list(self):
        assert shuffle_unlocked_only([], random.Random(0)) == 0
