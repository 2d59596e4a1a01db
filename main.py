#!/usr/bin/env python3
"""CLI entry point: simulate a drag-and-drop puzzle session."""

import argparse
import logging
import random
import sys
from pathlib import Path

import numpy as np

from puzzlekit.geometry import slot_frame
from puzzlekit.grid import PuzzleConfigError
from puzzlekit.session import PuzzleConfig, PuzzleSession


def setup_logging(verbose: bool) -> None:
    """Configure logging."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_grid_size(value: str) -> int:
    """Parse and validate the grid size argument."""
    try:
        size = int(value.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid grid size: {value}. Must be an integer.")
    if size < 2:
        raise argparse.ArgumentTypeError(f"Grid size must be at least 2. Got: {size}")
    return size


def make_pieces(grid_size: int, piece_size: int = 8) -> list[np.ndarray]:
    """Create solid-colour stand-in pieces, one grey level per slot."""
    total = grid_size**2
    return [
        np.full((piece_size, piece_size, 3), int(255 * i / max(total - 1, 1)), dtype=np.uint8)
        for i in range(total)
    ]


def play(session: PuzzleSession, board_size: float, jitter: float, max_drags: int, rng: random.Random) -> None:
    """
    Drag random unlocked tiles onto their correct slots until solved.

    Each drop lands on the target slot offset by up to ``jitter`` of a tile
    in each direction, so large jitter values produce cancelled drags.
    """
    grid_size = session.config.grid_size

    while not session.is_completed and session.metrics.total_drags < max_drags:
        movable = [tile for tile in session.tiles if not tile.is_locked and session.can_drag(tile)]
        tile = rng.choice(movable)
        target = slot_frame(tile.correct_index, grid_size, board_size, board_size)
        dx = rng.uniform(-jitter, jitter) * target.width
        dy = rng.uniform(-jitter, jitter) * target.height
        session.drag_ended(tile, target.translated(dx, dy))


def main():
    parser = argparse.ArgumentParser(
        description="PuzzleKit - simulate a drag-and-drop sliding-tile puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a 3x3 puzzle with a fixed shuffle
  python main.py --grid-size 3 --seed 42

  # Sloppy drops on a 5x5 board, allowing locked tiles to move
  python main.py --grid-size 5 --jitter 0.6 --allow-locked --output results/run1/
        """,
    )

    parser.add_argument(
        "--grid-size", "-g", type=parse_grid_size, default=3, help="Grid side length (default: 3)"
    )
    parser.add_argument(
        "--board-size", type=float, default=300.0, help="Board width and height in points"
    )
    parser.add_argument(
        "--allow-locked",
        action="store_true",
        help="Allow tiles already in their correct slot to be moved",
    )
    parser.add_argument(
        "--min-overlap",
        type=float,
        default=0.2,
        help="Fraction of a dragged tile a target must cover (default: 0.2)",
    )
    parser.add_argument(
        "--jitter",
        type=float,
        default=0.3,
        help="Maximum drop offset as a fraction of a tile (default: 0.3)",
    )
    parser.add_argument("--max-drags", type=int, default=500, help="Maximum number of drags")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for shuffle and drags")
    parser.add_argument("--output", "-o", type=str, default=None, help="Directory for result.json")
    parser.add_argument("--quiet", "-q", action="store_true", help="Reduce output verbosity")

    args = parser.parse_args()

    setup_logging(not args.quiet)
    logger = logging.getLogger(__name__)

    config = PuzzleConfig(
        grid_size=args.grid_size,
        can_move_locked_tiles=args.allow_locked,
        min_overlap_ratio=args.min_overlap,
        shuffle_seed=args.seed,
        verbose=not args.quiet,
    )

    session = PuzzleSession(
        config,
        on_complete=lambda s: logger.info("Congratulations! Puzzle completed."),
        on_image_loaded=lambda s: logger.info(f"Loaded {len(s.tiles)} pieces"),
    )

    try:
        session.load(make_pieces(args.grid_size))
        session.layout(args.board_size, args.board_size)
        play(session, args.board_size, args.jitter, args.max_drags, random.Random(args.seed))

        result = session.result()

        if args.output:
            output_path = Path(args.output) / "result.json"
            result.save(output_path)

        print("\n" + "=" * 50)
        print("PUZZLE SESSION COMPLETE")
        print("=" * 50)
        print(f"Solved: {'Yes' if result.solved else 'No'}")
        print(f"Final Score: {result.final_correct}/{result.total_pieces} ({result.accuracy:.1f}%)")
        print(f"Drags: {result.total_drags} (swaps: {result.total_swaps}, cancelled: {result.cancelled_drags})")
        print(f"Duration: {result.duration_seconds:.3f}s")
        logger.info(f"Metrics: {session.metrics.get_summary()}")
        if args.output:
            print(f"Results saved to: {output_path}")
        print("=" * 50)

        sys.exit(0 if result.solved else 1)

    except PuzzleConfigError as e:
        logger.error(f"Invalid puzzle configuration: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
