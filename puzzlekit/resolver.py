"""Pick the swap partner of a dragged tile from overlap areas."""

from typing import Optional, Sequence

import numpy as np

from .geometry import Box
from .tile import Tile

# Fraction of the dragged tile's area a candidate must cover to count as a drop target
MIN_OVERLAP_RATIO = 0.2


def overlap_areas(moving_box: Box, boxes: np.ndarray) -> np.ndarray:
    """
    Intersection areas of one box with many boxes.

    Args:
        moving_box: The dragged tile's box
        boxes: Array of shape (n, 4) holding (x1, y1, x2, y2) rows

    Returns:
        Array of n areas, 0 where boxes are disjoint
    """
    x1, y1, x2, y2 = moving_box.as_bounds()
    widths = np.minimum(boxes[:, 2], x2) - np.maximum(boxes[:, 0], x1)
    heights = np.minimum(boxes[:, 3], y2) - np.maximum(boxes[:, 1], y1)
    return np.clip(widths, 0, None) * np.clip(heights, 0, None)


def find_best_overlap_candidate(
    moving_tile: Tile,
    moving_box: Box,
    frames: Sequence[tuple[Tile, Box]],
    allow_locked: bool = False,
    min_overlap_ratio: float = MIN_OVERLAP_RATIO,
) -> Optional[Tile]:
    """
    Choose the tile a dragged tile should swap with.

    The candidate covering the largest area of the dragged tile wins; on
    equal areas the one listed first in ``frames`` wins. The winner is only
    accepted if it covers at least ``min_overlap_ratio`` of the dragged
    tile's own area.

    Args:
        moving_tile: The tile being dragged
        moving_box: Its box where the drag ended
        frames: (tile, box) pairs for the board; the dragged tile may be included
        allow_locked: Whether tiles already in their correct slot are candidates
        min_overlap_ratio: Minimum covered fraction of the dragged tile's area

    Returns:
        The target tile, or None if the drag should be reverted
    """
    candidates = [
        (tile, box)
        for tile, box in frames
        if tile is not moving_tile and (allow_locked or not tile.is_locked)
    ]
    if not candidates:
        return None

    boxes = np.array([box.as_bounds() for _, box in candidates], dtype=float)
    areas = overlap_areas(moving_box, boxes)

    best = int(np.argmax(areas))
    best_overlap = float(areas[best])

    # Tolerate rounding so an overlap of exactly the ratio is accepted
    required = moving_box.area * min_overlap_ratio
    if best_overlap <= 0 or (best_overlap < required and not np.isclose(best_overlap, required)):
        return None
    return candidates[best][0]
