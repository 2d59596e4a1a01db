"""Shuffling strategies for puzzle tiles."""

import logging
import random
from typing import Optional

from .tile import Tile

logger = logging.getLogger(__name__)


def _reindex(tiles: list[Tile]) -> None:
    """Set every tile's current index to its storage position."""
    for position, tile in enumerate(tiles):
        tile.current_index = position


def shuffle_ensuring_no_initial_lock(
    tiles: list[Tile], rng: Optional[random.Random] = None
) -> int:
    """
    Shuffle all tiles in place so that none starts in its correct slot.

    The whole sequence is reshuffled until a permutation without fixed
    points comes up. About 1/e of uniform permutations qualify, so only a
    handful of attempts are needed for any realistic grid.

    Args:
        tiles: Tiles in storage order; modified in place
        rng: Random source (a fresh unseeded one if omitted)

    Returns:
        Number of full shuffles performed (0 for an empty sequence)

    Raises:
        ValueError: If there is exactly one tile, which can never be unlocked
    """
    if not tiles:
        return 0
    if len(tiles) < 2:
        raise ValueError("Cannot shuffle a single tile out of its correct position")

    rng = rng or random.Random()
    attempts = 0

    while True:
        attempts += 1
        rng.shuffle(tiles)
        _reindex(tiles)
        if not any(tile.is_locked for tile in tiles):
            break

    logger.debug(f"Derangement of {len(tiles)} tiles found after {attempts} attempt(s)")
    return attempts


def shuffle_unlocked_only(tiles: list[Tile], rng: Optional[random.Random] = None) -> int:
    """
    Shuffle only the unlocked tiles among the slots they already occupy.

    Locked tiles keep their slots. The result is not checked for new
    locks, so a shuffled tile may land back in its correct slot.

    Args:
        tiles: Tiles in storage order; modified in place
        rng: Random source (a fresh unseeded one if omitted)

    Returns:
        Number of tiles that took part in the shuffle
    """
    rng = rng or random.Random()

    positions = [i for i, tile in enumerate(tiles) if not tile.is_locked]
    unlocked = [tiles[i] for i in positions]
    rng.shuffle(unlocked)

    for position, tile in zip(positions, unlocked):
        tiles[position] = tile
        tile.current_index = position

    return len(unlocked)
