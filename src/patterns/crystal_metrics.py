"""Shape analysis for grown crystals.

Measures a frozen mask: connectivity under hex adjacency, extent, and how
well it respects the lattice symmetries. A scan-order bias in the update
shows up here as a non-zero symmetry mismatch long before it is visible.
"""

import numpy as np
from typing import Dict, Tuple
from dataclasses import dataclass, asdict
from scipy import ndimage
import logging

from ..core.automaton import CrystalAutomaton
from ..core.hex_topology import HEX_KERNEL

logger = logging.getLogger(__name__)


# Hex neighborhood plus the cell itself, for ndimage.label
HEX_STRUCTURE = (HEX_KERNEL > 0).astype(int)
HEX_STRUCTURE[1, 1] = 1


@dataclass
class CrystalMetrics:
    """Snapshot of crystal shape measurements."""
    step_count: int
    frozen_count: int
    components: int
    radius: int
    bounds: Tuple[int, int, int, int]
    symmetry_mismatches: Dict[str, int]

    @property
    def connected(self) -> bool:
        return self.components == 1

    @property
    def symmetric(self) -> bool:
        return all(count == 0 for count in self.symmetry_mismatches.values())

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data['connected'] = self.connected
        data['symmetric'] = self.symmetric
        return data


def count_components(frozen: np.ndarray) -> int:
    """Number of hex-connected components in a boolean mask."""
    _, n_components = ndimage.label(frozen, structure=HEX_STRUCTURE)
    return int(n_components)


def is_connected(frozen: np.ndarray) -> bool:
    """True if the mask is one non-empty hex-connected set."""
    return count_components(frozen) == 1


def crystal_radius(frozen: np.ndarray, center: Tuple[int, int]) -> int:
    """Largest hex distance from center to any frozen cell."""
    ys, xs = np.nonzero(frozen)
    if len(xs) == 0:
        return 0
    dx = xs - center[0]
    dy = ys - center[1]
    return int(np.max(np.maximum(np.maximum(np.abs(dx), np.abs(dy)), np.abs(dx + dy))))


def symmetry_mismatches(frozen: np.ndarray, center: Tuple[int, int]) -> Dict[str, int]:
    """Count frozen cells whose image under a lattice symmetry is not frozen.

    Checked symmetries, all about center:
    - transpose: (x, y) -> (y, x)
    - point_reflection: (x, y) -> (2cx - x, 2cy - y)
    - rotation_60: one hex direction step, see rotate_60()

    Images falling outside the grid count as mismatches. The first two are
    symmetries of the whole square grid; rotation only holds while the
    crystal and its vapor disturbance stay clear of the border ring.
    """
    cx, cy = center
    height, width = frozen.shape
    ys, xs = np.nonzero(frozen)

    def missing(tx: np.ndarray, ty: np.ndarray) -> int:
        inside = (tx >= 0) & (tx < width) & (ty >= 0) & (ty < height)
        hit = np.zeros(len(tx), dtype=bool)
        hit[inside] = frozen[ty[inside], tx[inside]]
        return int(np.count_nonzero(~hit))

    a = xs - cx
    b = ys - cy
    return {
        'transpose': missing(cx + b, cy + a),
        'point_reflection': missing(cx - a, cy - b),
        'rotation_60': missing(cx - b, cy + a + b),
    }


def measure(automaton: CrystalAutomaton) -> CrystalMetrics:
    """Collect CrystalMetrics for the automaton's current frozen mask."""
    frozen = automaton.grid.frozen
    center = automaton.grid.center
    metrics = CrystalMetrics(
        step_count=automaton.step_count(),
        frozen_count=automaton.frozen_count(),
        components=count_components(frozen),
        radius=crystal_radius(frozen, center),
        bounds=automaton.grid.bounds(),
        symmetry_mismatches=symmetry_mismatches(frozen, center),
    )
    logger.debug(f"Measured crystal at step {metrics.step_count}: "
                 f"frozen={metrics.frozen_count}, radius={metrics.radius}")
    return metrics
