"""Cell state for the snow-crystal automaton.

The grid stores three parallel numpy arrays indexed [y, x]:

- frozen: bool, True once a cell has solidified (never cleared except by reset)
- s: float64 accumulated water content
- u: float64 diffusing vapor, scratch output of the last step

A fixed-width border ring around the working region is held at the ambient
vapor level and never freezes. For an even grid size the working region is
the leading (N-1) x (N-1) square so the seed sits on an exact center; the
trailing row and column then belong to the border ring.
"""

import numpy as np
from typing import Tuple
import logging

from .errors import CrystalConfigError
from .hex_topology import HexTopology

logger = logging.getLogger(__name__)


MIN_GRID_SIZE = 8
MAX_GRID_SIZE = 512
FREEZE_THRESHOLD = 1.0


class CrystalGrid:
    """N x N hexagonal cell grid with frozen mask and water/vapor fields.

    Attributes:
        size: Grid edge length N
        border_margin: Width of the border ring in cells
        active_size: Edge of the working region (N, or N - 1 when N is even)
        center: (x, y) of the seed cell
        topology: HexTopology for this grid
        frozen: (N, N) bool array
        s: (N, N) float64 water content
        u: (N, N) float64 vapor
        border: (N, N) bool mask of the border ring
        interior: complement of border
    """

    def __init__(self, size: int, border_margin: int = 1):
        """Allocate a grid. Cell values are undefined until reset().

        Args:
            size: Grid edge length N
            border_margin: Border ring width (>= 1)

        Raises:
            CrystalConfigError: If size or border_margin are unsupported
        """
        if size < MIN_GRID_SIZE:
            raise CrystalConfigError(f"Grid size must be at least {MIN_GRID_SIZE}, got {size}")
        if size > MAX_GRID_SIZE:
            raise CrystalConfigError(f"Grid size cannot exceed {MAX_GRID_SIZE}, got {size}")
        if border_margin < 1:
            raise CrystalConfigError(f"Border margin must be at least 1, got {border_margin}")

        self.size = size
        self.border_margin = border_margin
        self.active_size = size if size % 2 == 1 else size - 1

        if self.active_size - 2 * border_margin < 3:
            raise CrystalConfigError(
                f"Border margin {border_margin} leaves no interior on a {size}x{size} grid"
            )

        c = self.active_size // 2
        self.center: Tuple[int, int] = (c, c)
        self.topology = HexTopology(size)

        self.frozen = np.zeros((size, size), dtype=bool)
        self.s = np.zeros((size, size), dtype=np.float64)
        self.u = np.zeros((size, size), dtype=np.float64)

        lo = border_margin
        hi = self.active_size - border_margin
        self.interior = np.zeros((size, size), dtype=bool)
        self.interior[lo:hi, lo:hi] = True
        self.border = ~self.interior

        logger.debug(f"Created crystal grid {size}x{size}, active={self.active_size}, "
                     f"margin={border_margin}, center={self.center}")

    def reset(self, beta: float) -> None:
        """Reinitialize in place: all cells at beta, only the center frozen."""
        self.frozen.fill(False)
        self.s.fill(beta)
        self.u.fill(0.0)

        cx, cy = self.center
        self.frozen[cy, cx] = True
        self.s[cy, cx] = FREEZE_THRESHOLD

    def _check(self, x: int, y: int) -> None:
        if not self.topology.in_bounds(x, y):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.size}x{self.size} grid")

    def is_frozen(self, x: int, y: int) -> bool:
        """Frozen state of cell (x, y).

        Raises:
            IndexError: If coordinates are out of bounds
        """
        self._check(x, y)
        return bool(self.frozen[y, x])

    def water_content(self, x: int, y: int) -> float:
        """Accumulated water s of cell (x, y).

        Raises:
            IndexError: If coordinates are out of bounds
        """
        self._check(x, y)
        return float(self.s[y, x])

    def vapor(self, x: int, y: int) -> float:
        """Diffused vapor u of cell (x, y) from the last step."""
        self._check(x, y)
        return float(self.u[y, x])

    def is_border(self, x: int, y: int) -> bool:
        """True if (x, y) lies in the border ring."""
        self._check(x, y)
        return bool(self.border[y, x])

    def frozen_count(self) -> int:
        """Number of frozen cells."""
        return int(np.count_nonzero(self.frozen))

    def boundary_mask(self) -> np.ndarray:
        """Unfrozen non-border cells with at least one frozen neighbor."""
        return ~self.frozen & self.topology.touches(self.frozen) & self.interior

    def receptive_mask(self) -> np.ndarray:
        """Frozen cells plus boundary cells, excluding the border ring."""
        return (self.frozen | self.boundary_mask()) & self.interior

    def commit(self, s_new: np.ndarray, u_new: np.ndarray, newly_frozen: np.ndarray) -> None:
        """Write a fully computed step back into the grid.

        Copies into the existing arrays, so no allocation happens here.
        """
        np.copyto(self.s, s_new)
        np.copyto(self.u, u_new)
        np.logical_or(self.frozen, newly_frozen, out=self.frozen)

    def bounds(self) -> Tuple[int, int, int, int]:
        """Bounding box of frozen cells (min_x, min_y, max_x, max_y)."""
        rows, cols = np.nonzero(self.frozen)
        if len(rows) == 0:
            return (0, 0, self.size - 1, self.size - 1)
        return (int(cols.min()), int(rows.min()), int(cols.max()), int(rows.max()))

    def copy(self) -> 'CrystalGrid':
        """Create a deep copy of the grid."""
        new_grid = CrystalGrid(self.size, self.border_margin)
        new_grid.frozen[:] = self.frozen
        new_grid.s[:] = self.s
        new_grid.u[:] = self.u
        return new_grid

    def __eq__(self, other: object) -> bool:
        """Bit-exact equality of geometry and all cell arrays."""
        if not isinstance(other, CrystalGrid):
            return False
        return (self.size == other.size and
                self.border_margin == other.border_margin and
                np.array_equal(self.frozen, other.frozen) and
                np.array_equal(self.s, other.s) and
                np.array_equal(self.u, other.u))

    def to_ascii(self, frozen_char: str = '*', empty_char: str = '.', stagger: bool = True) -> str:
        """Render the frozen mask as text.

        With stagger=True each row is indented by half a cell per row so the
        axial hex lattice reads with its true 60 degree angles.
        """
        lines = []
        for y in range(self.size):
            cells = ' '.join(frozen_char if self.frozen[y, x] else empty_char
                             for x in range(self.size))
            indent = ' ' * y if stagger else ''
            lines.append(indent + cells)
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.to_ascii()

    def __repr__(self) -> str:
        return f"CrystalGrid({self.size}x{self.size}, frozen={self.frozen_count()})"
