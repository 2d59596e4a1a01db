"""Session controller tying the grid, shuffler and drag resolver together."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from .geometry import Box, slot_frame
from .grid import PuzzleConfigError, PuzzleGrid
from .metrics import DragResult, MetricsTracker, SessionResult
from .resolver import MIN_OVERLAP_RATIO, find_best_overlap_candidate
from .tile import Tile

logger = logging.getLogger(__name__)

SessionCallback = Callable[["PuzzleSession"], None]


@dataclass
class PuzzleConfig:
    """Configuration for a puzzle session."""

    grid_size: int = 3  # 3 -> 3x3, 4 -> 4x4, ...

    # Move rules
    can_move_locked_tiles: bool = False
    min_overlap_ratio: float = MIN_OVERLAP_RATIO  # Fraction of the dragged tile to cover

    shuffle_seed: Optional[int] = None
    verbose: bool = True


class PuzzleSession:
    """Runs one puzzle from loaded pieces to completion."""

    def __init__(
        self,
        config: PuzzleConfig,
        on_complete: Optional[SessionCallback] = None,
        on_image_loaded: Optional[SessionCallback] = None,
    ):
        """
        Initialize the session.

        Args:
            config: Session configuration
            on_complete: Called once when the last tile locks into place
            on_image_loaded: Called on the first layout after pieces are loaded
        """
        self.config = config
        self.on_complete = on_complete
        self.on_image_loaded = on_image_loaded

        self.grid: Optional[PuzzleGrid] = None
        self.metrics = MetricsTracker(total_pieces=config.grid_size**2)
        self.is_completed = False

        self._pieces: Optional[list[Any]] = None
        self._has_laid_out = False
        self._board_size: Optional[tuple[float, float]] = None
        self._frames: list[tuple[Tile, Box]] = []
        self._start_time: Optional[datetime] = None
        self._end_time: Optional[datetime] = None
        self._solve_drag: Optional[int] = None

    @property
    def tiles(self) -> list[Tile]:
        """Tiles in storage order, empty before the first layout."""
        return self.grid.tiles if self.grid is not None else []

    def load(self, pieces: Sequence[Any]) -> None:
        """
        Load a new set of image pieces, discarding the current puzzle.

        Args:
            pieces: grid_size**2 payloads in row-major solved order

        Raises:
            PuzzleConfigError: If the number of pieces does not fill the grid
        """
        pieces = list(pieces)
        expected = self.config.grid_size**2
        if len(pieces) != expected:
            raise PuzzleConfigError(
                f"Expected {expected} pieces for a {self.config.grid_size}x"
                f"{self.config.grid_size} puzzle, got {len(pieces)}"
            )

        self._pieces = pieces
        self._has_laid_out = False
        self._frames = []
        self.grid = None
        self.is_completed = False
        self._solve_drag = None
        self._start_time = None
        self._end_time = None
        self.metrics = MetricsTracker(total_pieces=expected)

    def _setup_tiles(self) -> None:
        grid = PuzzleGrid(self.config.grid_size, seed=self.config.shuffle_seed)
        grid.set_tiles([Tile(correct_index=i, payload=p) for i, p in enumerate(self._pieces)])
        attempts = grid.shuffle_ensuring_no_initial_lock()

        self.grid = grid
        self.metrics = MetricsTracker(
            total_pieces=grid.total_tiles, initial_correct=grid.count_locked()
        )
        self._start_time = datetime.now()

        if self.config.verbose:
            logger.info(
                f"Puzzle ready: {self.config.grid_size}x{self.config.grid_size}, "
                f"shuffled in {attempts} attempt(s)"
            )

    def layout(self, width: float, height: float) -> list[tuple[Tile, Box]]:
        """
        Lay the tiles out on a board of the given size.

        The first call after ``load`` builds and shuffles the tiles.

        Returns:
            (tile, frame) pairs in storage order, empty if nothing can be laid out
        """
        if self._pieces is None or width <= 0 or height <= 0:
            return []

        self._board_size = (width, height)

        if not self._has_laid_out:
            self._setup_tiles()
            self._has_laid_out = True
            if self.on_image_loaded is not None:
                self.on_image_loaded(self)

        return self._layout_tiles()

    def _layout_tiles(self) -> list[tuple[Tile, Box]]:
        if self.grid is None or self._board_size is None:
            return []

        width, height = self._board_size
        self._frames = [
            (tile, slot_frame(tile.current_index, self.grid.grid_size, width, height))
            for tile in self.grid.tiles
        ]
        return list(self._frames)

    def frame_of(self, tile: Tile) -> Box:
        """Get a tile's frame from the last layout."""
        for candidate, frame in self._frames:
            if candidate is tile:
                return frame
        raise ValueError(f"{tile!r} has not been laid out")

    def can_drag(self, tile: Tile) -> bool:
        """Check whether a drag on this tile should start at all."""
        if self.grid is None or self.is_completed:
            return False
        return self.config.can_move_locked_tiles or not tile.is_locked

    def drag_ended(self, tile: Tile, moved_box: Box) -> Optional[DragResult]:
        """
        Handle the end of a drag gesture.

        Args:
            tile: The dragged tile
            moved_box: The tile's box where the drag ended

        Returns:
            DragResult describing the outcome, or None if the drag was ignored
        """
        if self.grid is None:
            raise RuntimeError("Puzzle has not been laid out yet")

        from_index = self.grid.index_of(tile)
        if not self.can_drag(tile):
            return None

        correct_before = self.grid.count_locked()
        target = find_best_overlap_candidate(
            moving_tile=tile,
            moving_box=moved_box,
            frames=self._frames,
            allow_locked=self.config.can_move_locked_tiles,
            min_overlap_ratio=self.config.min_overlap_ratio,
        )

        swapped = False
        if target is not None:
            swapped = self.grid.swap(
                from_index,
                self.grid.index_of(target),
                allow_locked=self.config.can_move_locked_tiles,
            )

        self._layout_tiles()

        drag_result = DragResult(
            drag_number=self.metrics.total_drags + 1,
            tile_index=tile.correct_index,
            target_index=target.correct_index if target is not None else None,
            swapped=swapped,
            correct_before=correct_before,
            correct_after=self.grid.count_locked(),
        )
        self.metrics.record_drag(drag_result)

        if self.config.verbose:
            if swapped:
                logger.info(
                    f"Drag {drag_result.drag_number}: tile {drag_result.tile_index} <-> "
                    f"tile {drag_result.target_index} "
                    f"({drag_result.correct_after}/{self.grid.total_tiles} locked)"
                )
            else:
                logger.info(f"Drag {drag_result.drag_number}: cancelled")

        self._check_completion()
        return drag_result

    def _check_completion(self) -> None:
        if self.is_completed or self.grid is None or not self.grid.is_complete():
            return

        self.is_completed = True
        self._solve_drag = self.metrics.total_drags
        self._end_time = datetime.now()

        if self.config.verbose:
            logger.info(f"Puzzle solved after {self.metrics.total_drags} drags!")

        if self.on_complete is not None:
            self.on_complete(self)

    def shuffle(self) -> None:
        """Reshuffle every tile so none is locked and restart the puzzle."""
        if self.grid is None:
            return

        self.grid.shuffle_ensuring_no_initial_lock()
        self.is_completed = False
        self._solve_drag = None
        self._end_time = None
        self._layout_tiles()

    def shuffle_unlocked(self) -> None:
        """Reshuffle only the tiles that are not yet in place."""
        if self.grid is None:
            return

        moved = self.grid.shuffle_unlocked_only()
        self._layout_tiles()

        if self.config.verbose:
            logger.info(
                f"Reshuffled {moved} unlocked tiles "
                f"({self.grid.count_locked()}/{self.grid.total_tiles} locked)"
            )

        self._check_completion()

    def is_solved(self) -> bool:
        """Check if the puzzle is currently solved."""
        return self.grid is not None and self.grid.is_complete()

    def result(self) -> SessionResult:
        """Build a result snapshot of the session so far."""
        start = self._start_time or datetime.now()
        end = self._end_time or datetime.now()
        final_correct = self.grid.count_locked() if self.grid is not None else 0

        return SessionResult(
            grid_size=self.config.grid_size,
            can_move_locked_tiles=self.config.can_move_locked_tiles,
            min_overlap_ratio=self.config.min_overlap_ratio,
            shuffle_seed=self.config.shuffle_seed,
            solved=self.is_solved(),
            solve_drag=self._solve_drag,
            total_drags=self.metrics.total_drags,
            total_swaps=self.metrics.total_swaps,
            cancelled_drags=self.metrics.cancelled_drags,
            max_correct_achieved=max(self.metrics.max_correct, final_correct),
            final_correct=final_correct,
            total_pieces=self.config.grid_size**2,
            start_time=start.isoformat(),
            end_time=end.isoformat(),
            duration_seconds=(end - start).total_seconds(),
            drag_history=list(self.metrics.drags),
        )
