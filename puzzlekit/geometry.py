"""Axis-aligned boxes and board layout."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in board coordinates (origin top-left)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersection_area(self, other: "Box") -> float:
        """Area shared with another box, 0 if they do not overlap."""
        overlap_w = min(self.max_x, other.max_x) - max(self.x, other.x)
        overlap_h = min(self.max_y, other.max_y) - max(self.y, other.y)
        if overlap_w <= 0 or overlap_h <= 0:
            return 0.0
        return overlap_w * overlap_h

    def translated(self, dx: float, dy: float) -> "Box":
        """Return a copy moved by (dx, dy)."""
        return Box(self.x + dx, self.y + dy, self.width, self.height)

    def as_bounds(self) -> tuple[float, float, float, float]:
        """Return (x1, y1, x2, y2)."""
        return self.x, self.y, self.max_x, self.max_y


def slot_frame(index: int, grid_size: int, width: float, height: float) -> Box:
    """
    Compute the frame of a slot on a board.

    Args:
        index: Row-major slot index
        grid_size: Side length of the grid
        width: Board width
        height: Board height

    Returns:
        Box covering the slot
    """
    row, col = divmod(index, grid_size)
    tile_width = width / grid_size
    tile_height = height / grid_size
    return Box(col * tile_width, row * tile_height, tile_width, tile_height)
