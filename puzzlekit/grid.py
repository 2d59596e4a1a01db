"""Grid model: tile storage, swap rules and completion detection."""

import logging
import random
from typing import Optional

from .shuffle import shuffle_ensuring_no_initial_lock, shuffle_unlocked_only
from .tile import Tile

logger = logging.getLogger(__name__)


class PuzzleConfigError(ValueError):
    """Raised when a puzzle is populated with an inconsistent tile set."""


class PuzzleGrid:
    """Holds the tiles of a square puzzle and enforces the swap rules."""

    def __init__(self, grid_size: int, seed: Optional[int] = None):
        """
        Initialize an empty grid.

        Args:
            grid_size: Side length of the grid (e.g., 3 for 3x3)
            seed: Random seed for reproducible shuffling
        """
        if grid_size < 2:
            raise PuzzleConfigError(f"Grid size must be at least 2. Got: {grid_size}")

        self.grid_size = grid_size
        self.seed = seed
        self._rng = random.Random(seed)

        # Storage position of a tile is always equal to its current index
        self._tiles: list[Tile] = []

    @property
    def tiles(self) -> list[Tile]:
        """Tiles in storage order (a copy; mutate through the grid)."""
        return list(self._tiles)

    @property
    def total_tiles(self) -> int:
        """Number of slots on the board."""
        return self.grid_size**2

    def set_tiles(self, tiles: list[Tile]) -> None:
        """
        Replace the whole tile sequence.

        Args:
            tiles: Exactly grid_size**2 tiles whose correct indices cover every
                slot once, each stored at the position of its current index

        Raises:
            PuzzleConfigError: If the tile set does not describe a valid board
        """
        tiles = list(tiles)

        if len(tiles) != self.total_tiles:
            raise PuzzleConfigError(
                f"Expected {self.total_tiles} tiles for a {self.grid_size}x{self.grid_size} "
                f"grid, got {len(tiles)}"
            )

        correct = sorted(tile.correct_index for tile in tiles)
        if correct != list(range(self.total_tiles)):
            raise PuzzleConfigError(
                f"Correct indices must be a permutation of 0..{self.total_tiles - 1}"
            )

        for position, tile in enumerate(tiles):
            if tile.current_index != position:
                raise PuzzleConfigError(
                    f"Tile with correct index {tile.correct_index} is stored at {position} "
                    f"but reports current index {tile.current_index}"
                )

        self._tiles = tiles

    def swap(self, first_index: int, second_index: int, allow_locked: bool = False) -> bool:
        """
        Swap the tiles stored at two positions.

        Args:
            first_index: Storage position of the first tile
            second_index: Storage position of the second tile
            allow_locked: Whether tiles already in their correct slot may move

        Returns:
            True if the tiles were swapped, False if the lock rule blocked it
        """
        for index in (first_index, second_index):
            if not 0 <= index < len(self._tiles):
                raise IndexError(f"Slot {index} is outside the grid (0..{len(self._tiles) - 1})")

        first = self._tiles[first_index]
        second = self._tiles[second_index]

        if not allow_locked and (first.is_locked or second.is_locked):
            logger.debug(f"Swap {first_index} <-> {second_index} blocked by locked tile")
            return False

        self._tiles[first_index], self._tiles[second_index] = second, first
        first.current_index, second.current_index = second.current_index, first.current_index
        return True

    def is_complete(self) -> bool:
        """Check if every tile is in its correct slot."""
        return bool(self._tiles) and all(tile.is_locked for tile in self._tiles)

    def count_locked(self) -> int:
        """Count how many tiles are in their correct slot."""
        return sum(1 for tile in self._tiles if tile.is_locked)

    def tile_at(self, index: int) -> Tile:
        return self._tiles[index]

    def index_of(self, tile: Tile) -> int:
        """
        Find the storage position of a tile.

        Raises:
            ValueError: If the tile is not on this grid
        """
        for position, candidate in enumerate(self._tiles):
            if candidate is tile:
                return position
        raise ValueError(f"{tile!r} is not on this grid")

    def arrangement(self) -> list[int]:
        """Correct index of the tile in each slot, row-major."""
        return [tile.correct_index for tile in self._tiles]

    def shuffle_ensuring_no_initial_lock(self) -> int:
        """Shuffle every tile so none starts locked. Returns the attempts needed."""
        return shuffle_ensuring_no_initial_lock(self._tiles, self._rng)

    def shuffle_unlocked_only(self) -> int:
        """Shuffle unlocked tiles among their own slots. Returns how many moved."""
        return shuffle_unlocked_only(self._tiles, self._rng)
