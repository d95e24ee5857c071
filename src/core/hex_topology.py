"""Hexagonal neighborhood on a square index grid.

Cells are addressed as (x, y) with numpy arrays indexed [y, x]. The six hex
directions use the axial approximation: a fixed direction table applied
uniformly to every cell, which keeps the lattice symmetric under 60 degree
rotation about any cell and under transposition of the index grid.
"""

import numpy as np
from typing import List, Tuple
from scipy.signal import correlate2d
import logging

logger = logging.getLogger(__name__)


# 0, 60, 120, 180, 240, 300 degrees
HEX_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)
)

# HEX_KERNEL[dy + 1, dx + 1] == 1 for every direction above
HEX_KERNEL = np.array([
    [0, 1, 1],
    [1, 0, 1],
    [1, 1, 0]
], dtype=np.float64)


class HexTopology:
    """Neighbor queries and bounds checks for an N x N hex grid.

    Attributes:
        size: Grid edge length N
        neighbor_counts: (N, N) array with the number of in-bounds neighbors
            of every cell (6 in the interior, fewer on the edge)
    """

    def __init__(self, size: int):
        """Initialize topology for a square grid.

        Args:
            size: Grid edge length in cells

        Raises:
            ValueError: If size is not positive
        """
        if size < 1:
            raise ValueError("Grid size must be positive")

        self.size = size
        self.neighbor_counts = self.neighbor_sum(np.ones((size, size), dtype=np.float64))

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True iff 0 <= x, y < size."""
        return 0 <= x < self.size and 0 <= y < self.size

    def neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """All six neighbor coordinates of (x, y), in direction order.

        Coordinates are not clipped; combine with in_bounds() when needed.
        """
        return [(x + dx, y + dy) for dx, dy in HEX_DIRECTIONS]

    def in_bounds_neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """Neighbor coordinates of (x, y) that lie inside the grid."""
        return [(nx, ny) for nx, ny in self.neighbors(x, y) if self.in_bounds(nx, ny)]

    def neighbor_sum(self, values: np.ndarray) -> np.ndarray:
        """Sum of each cell's in-bounds neighbor values.

        Out-of-bounds neighbors contribute zero, so dividing by
        neighbor_counts gives the true average over existing neighbors.

        Args:
            values: (N, N) float array indexed [y, x]

        Returns:
            New (N, N) float array of neighbor sums
        """
        return correlate2d(values, HEX_KERNEL, mode='same', boundary='fill', fillvalue=0.0)

    def neighbor_average(self, values: np.ndarray) -> np.ndarray:
        """Average of each cell's in-bounds neighbor values."""
        return self.neighbor_sum(values) / self.neighbor_counts

    def touches(self, mask: np.ndarray) -> np.ndarray:
        """Boolean array marking cells with at least one neighbor set in mask."""
        return self.neighbor_sum(mask.astype(np.float64)) > 0.0

    def shifted(self, mask: np.ndarray, dx: int, dy: int) -> np.ndarray:
        """Translate mask by (dx, dy); cells shifted in from outside are False.

        The result at (x, y) is mask[y - dy, x - dx], i.e. whether the cell one
        step against direction (dx, dy) is set.
        """
        n = self.size
        out = np.zeros_like(mask)
        src_x = slice(max(0, -dx), n - max(0, dx))
        dst_x = slice(max(0, dx), n - max(0, -dx))
        src_y = slice(max(0, -dy), n - max(0, dy))
        dst_y = slice(max(0, dy), n - max(0, -dy))
        out[dst_y, dst_x] = mask[src_y, src_x]
        return out


def hex_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Number of hex steps between two cells under the axial direction table."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    return max(abs(dx), abs(dy), abs(dx + dy))


def rotate_60(x: int, y: int, center: Tuple[int, int]) -> Tuple[int, int]:
    """Rotate (x, y) one direction step (60 degrees) about center.

    Permutes HEX_DIRECTIONS, so adjacency is preserved.
    """
    cx, cy = center
    a, b = x - cx, y - cy
    return (cx - b, cy + a + b)
