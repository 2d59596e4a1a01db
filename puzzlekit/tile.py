"""Tile model for the sliding-tile puzzle."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class Tile:
    """
    One piece of the partitioned puzzle image.

    Tiles compare by identity, so two tiles carrying equal payloads are
    still distinct pieces on the board.
    """

    correct_index: int
    payload: Any = None  # Image sub-piece, never inspected by the engine
    current_index: Optional[int] = None

    def __post_init__(self):
        if self.current_index is None:
            self.current_index = self.correct_index

    @property
    def is_locked(self) -> bool:
        """A tile is locked when it sits in its correct slot."""
        return self.current_index == self.correct_index

    def __repr__(self) -> str:
        return f"Tile(correct={self.correct_index}, current={self.current_index})"
