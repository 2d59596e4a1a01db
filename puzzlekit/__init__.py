"""PuzzleKit - the logic engine of a drag-and-drop sliding-tile image puzzle."""

from .tile import Tile
from .grid import PuzzleGrid, PuzzleConfigError
from .geometry import Box, slot_frame
from .resolver import find_best_overlap_candidate
from .session import PuzzleSession, PuzzleConfig
from .metrics import DragResult, SessionResult

__version__ = "0.1.0"

__all__ = [
    "Tile",
    "PuzzleGrid",
    "PuzzleConfigError",
    "Box",
    "slot_frame",
    "find_best_overlap_candidate",
    "PuzzleSession",
    "PuzzleConfig",
    "DragResult",
    "SessionResult",
]
