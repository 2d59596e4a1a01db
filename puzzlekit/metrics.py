"""Metrics and result tracking for puzzle sessions."""

from dataclasses import dataclass, field
from typing import Optional
import json
from pathlib import Path


@dataclass
class DragResult:
    """Result of a single drag gesture."""

    drag_number: int
    tile_index: int  # Correct index of the dragged tile
    target_index: Optional[int]  # Correct index of the chosen target, if any
    swapped: bool
    correct_before: int
    correct_after: int

    @property
    def cancelled(self) -> bool:
        """Whether the drag was reverted without a swap."""
        return not self.swapped

    @property
    def progress(self) -> int:
        """Net change in locked tiles."""
        return self.correct_after - self.correct_before

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "drag_number": self.drag_number,
            "tile_index": self.tile_index,
            "target_index": self.target_index,
            "swapped": self.swapped,
            "correct_before": self.correct_before,
            "correct_after": self.correct_after,
        }


@dataclass
class SessionResult:
    """Complete result of a puzzle session."""

    # Configuration
    grid_size: int
    can_move_locked_tiles: bool
    min_overlap_ratio: float
    shuffle_seed: Optional[int]

    # Results
    solved: bool
    solve_drag: Optional[int]  # Drag that completed the puzzle, if any

    # Metrics
    total_drags: int
    total_swaps: int
    cancelled_drags: int
    max_correct_achieved: int
    final_correct: int
    total_pieces: int

    # Timing
    start_time: str
    end_time: str
    duration_seconds: float

    # History
    drag_history: list[DragResult] = field(default_factory=list)

    @property
    def accuracy(self) -> float:
        """Final accuracy as percentage."""
        return (self.final_correct / self.total_pieces) * 100 if self.total_pieces > 0 else 0

    @property
    def max_accuracy(self) -> float:
        """Maximum accuracy achieved as percentage."""
        return (self.max_correct_achieved / self.total_pieces) * 100 if self.total_pieces > 0 else 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "config": {
                "grid_size": self.grid_size,
                "can_move_locked_tiles": self.can_move_locked_tiles,
                "min_overlap_ratio": self.min_overlap_ratio,
                "shuffle_seed": self.shuffle_seed,
            },
            "results": {
                "solved": self.solved,
                "solve_drag": self.solve_drag,
                "total_drags": self.total_drags,
                "total_swaps": self.total_swaps,
                "cancelled_drags": self.cancelled_drags,
                "max_correct_achieved": self.max_correct_achieved,
                "final_correct": self.final_correct,
                "total_pieces": self.total_pieces,
                "accuracy": self.accuracy,
                "max_accuracy": self.max_accuracy,
            },
            "timing": {
                "start_time": self.start_time,
                "end_time": self.end_time,
                "duration_seconds": self.duration_seconds,
            },
            "drag_history": [d.to_dict() for d in self.drag_history],
        }

    def save(self, path: str | Path) -> None:
        """Save result to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionResult":
        """Load from dictionary."""
        config = data["config"]
        results = data["results"]
        timing = data["timing"]

        drag_history = [
            DragResult(
                drag_number=d["drag_number"],
                tile_index=d["tile_index"],
                target_index=d.get("target_index"),
                swapped=d["swapped"],
                correct_before=d["correct_before"],
                correct_after=d["correct_after"],
            )
            for d in data.get("drag_history", [])
        ]

        return cls(
            grid_size=config["grid_size"],
            can_move_locked_tiles=config["can_move_locked_tiles"],
            min_overlap_ratio=config["min_overlap_ratio"],
            shuffle_seed=config.get("shuffle_seed"),
            solved=results["solved"],
            solve_drag=results.get("solve_drag"),
            total_drags=results["total_drags"],
            total_swaps=results["total_swaps"],
            cancelled_drags=results["cancelled_drags"],
            max_correct_achieved=results["max_correct_achieved"],
            final_correct=results["final_correct"],
            total_pieces=results["total_pieces"],
            start_time=timing["start_time"],
            end_time=timing["end_time"],
            duration_seconds=timing["duration_seconds"],
            drag_history=drag_history,
        )

    @classmethod
    def load(cls, path: str | Path) -> "SessionResult":
        """Load from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)


class MetricsTracker:
    """Tracks metrics during a session."""

    def __init__(self, total_pieces: int, initial_correct: int = 0):
        self.total_pieces = total_pieces
        self.drags: list[DragResult] = []
        self.max_correct = initial_correct
        self.total_swaps = 0
        self.cancelled_drags = 0

    def record_drag(self, drag_result: DragResult) -> None:
        """Record a drag result."""
        self.drags.append(drag_result)
        if drag_result.swapped:
            self.total_swaps += 1
        else:
            self.cancelled_drags += 1
        self.max_correct = max(self.max_correct, drag_result.correct_after)

    @property
    def total_drags(self) -> int:
        return len(self.drags)

    def get_summary(self) -> dict:
        """Get a summary of current metrics."""
        return {
            "drags": self.total_drags,
            "total_swaps": self.total_swaps,
            "cancelled_drags": self.cancelled_drags,
            "max_correct": self.max_correct,
            "current_correct": self.drags[-1].correct_after if self.drags else 0,
        }
