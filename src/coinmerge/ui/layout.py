from dataclasses import dataclass
from typing import Optional, Tuple

from coinmerge.components.grid_config import GridConfig


@dataclass(slots=True)
class BoardGeometry:
    """Screen placement of the grid. Row 0 is the top row, as on the board."""
    rows: int
    cols: int
    square_size: float
    gap: float
    left: float
    bottom: float

    @property
    def pitch(self) -> float:
        return self.square_size + self.gap

    @property
    def width(self) -> float:
        return self.cols * self.square_size + (self.cols - 1) * self.gap

    @property
    def height(self) -> float:
        return self.rows * self.square_size + (self.rows - 1) * self.gap

    @property
    def top(self) -> float:
        return self.bottom + self.height

    def cell_center(self, row: float, col: float) -> Tuple[float, float]:
        """Centre of a cell; fractional and negative rows are allowed for falling tiles."""
        cx = self.left + col * self.pitch + self.square_size / 2
        cy = self.top - row * self.pitch - self.square_size / 2
        return cx, cy


def compute_board_geometry(
    window_width: int,
    window_height: int,
    config: GridConfig,
    bottom_margin: float = 60,
) -> BoardGeometry:
    """Centre the board horizontally and in the space above the HUD margin.

    Square size shrinks when the configured size does not fit the window; the gap
    shrinks with it.
    """
    square = float(config.square_size)
    gap = float(config.gap)
    natural_w = config.cols * square + (config.cols - 1) * gap
    natural_h = config.rows * square + (config.rows - 1) * gap
    avail_h = max(window_height - bottom_margin * 2, 1)
    scale = min(1.0, window_width * 0.95 / natural_w, avail_h / natural_h)
    square *= scale
    gap *= scale
    width = config.cols * square + (config.cols - 1) * gap
    height = config.rows * square + (config.rows - 1) * gap
    left = (window_width - width) / 2
    bottom = bottom_margin + (avail_h - height) / 2
    return BoardGeometry(
        rows=config.rows,
        cols=config.cols,
        square_size=square,
        gap=gap,
        left=left,
        bottom=bottom,
    )


def cell_at_point(x: float, y: float, geometry: BoardGeometry) -> Optional[Tuple[int, int]]:
    """Return (row, col) under the point, or None off the grid or inside a gap."""
    dx = x - geometry.left
    dy = geometry.top - y
    if dx < 0 or dy < 0:
        return None
    col = int(dx // geometry.pitch)
    row = int(dy // geometry.pitch)
    if row >= geometry.rows or col >= geometry.cols:
        return None
    if dx - col * geometry.pitch > geometry.square_size or dy - row * geometry.pitch > geometry.square_size:
        return None
    return row, col
