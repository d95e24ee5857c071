"""Growth rules for the snow-crystal automaton.

A growth rule advances a CrystalGrid by one generation and reports how many
cells froze. Two rules are provided and are never mixed within one run:

- DiffusionGrowthRule: Reiter's local vapor model (classification,
  diffusion, accumulation/freezing).
- ProbabilisticGrowthRule: direct freezing of cells next to the crystal
  with a fixed chance per direction, no vapor field.

Every phase reads only the state committed by the previous step and writes
into fresh arrays; the grid is updated in one commit at the very end, so a
failed allocation leaves the grid untouched.
"""

import numpy as np
from typing import Optional
import logging

from .crystal_grid import CrystalGrid, FREEZE_THRESHOLD
from .growth_params import GrowthParams
from .hex_topology import HEX_DIRECTIONS

logger = logging.getLogger(__name__)


# Absorbs rounding in repeated gamma additions (0.5 + 50 * 0.01).
FREEZE_TOLERANCE = 1e-9


class GrowthRule:
    """Strategy interface: one generation of crystal growth."""

    name = "abstract"

    def reset(self, params: GrowthParams) -> None:
        """Called whenever the owning automaton resets."""

    def advance(self, grid: CrystalGrid, params: GrowthParams) -> int:
        """Advance grid by one generation.

        Args:
            grid: Grid to update in place
            params: Parameter snapshot, constant for the whole call

        Returns:
            Number of cells newly frozen
        """
        raise NotImplementedError


class DiffusionGrowthRule(GrowthRule):
    """Reiter's diffusion-limited snow-crystal rule.

    Receptive cells (frozen, or unfrozen with a frozen neighbor) keep their
    water and gain gamma each step. Everything else is free vapor that
    diffuses toward the hex neighbor average at rate alpha / 2. The border
    ring is pinned to beta as an infinite vapor bath.

    Diffused vapor never feeds a receptive cell directly: a cell's content
    when it turns receptive is whatever vapor it held as a non-receptive cell,
    and from then on only gamma adds to it. Frozen cells keep their s.
    """

    name = "diffusion"

    def classify(self, grid: CrystalGrid) -> np.ndarray:
        """Phase 1: receptive mask from the committed frozen mask."""
        return grid.receptive_mask()

    def split_vapor(self, grid: CrystalGrid, receptive: np.ndarray) -> np.ndarray:
        """Phase 1: free vapor u (0 for receptive cells, s otherwise)."""
        return np.where(receptive, 0.0, grid.s)

    def diffuse(self, grid: CrystalGrid, u: np.ndarray, params: GrowthParams) -> np.ndarray:
        """Phase 2: one diffusion pass into a new buffer, border pinned to beta."""
        neighbor_avg = grid.topology.neighbor_average(u)
        u_next = u + (params.alpha / 2.0) * (neighbor_avg - u)
        u_next[grid.border] = params.beta
        return u_next

    def accumulate(self, grid: CrystalGrid, receptive: np.ndarray, u_next: np.ndarray,
                   params: GrowthParams):
        """Phase 3: new water content and the set of cells that freeze.

        Returns:
            (s_next, newly_frozen)
        """
        frozen = grid.frozen
        s_next = np.where(receptive, grid.s + params.gamma, u_next)
        s_next[frozen] = grid.s[frozen]

        newly_frozen = receptive & ~frozen & (s_next >= FREEZE_THRESHOLD - FREEZE_TOLERANCE)
        s_next[newly_frozen] = np.maximum(s_next[newly_frozen], FREEZE_THRESHOLD)
        s_next[grid.border] = params.beta
        return s_next, newly_frozen

    def advance(self, grid: CrystalGrid, params: GrowthParams) -> int:
        receptive = self.classify(grid)
        u = self.split_vapor(grid, receptive)
        u_next = self.diffuse(grid, u, params)
        # frozen is not touched until commit, so receptive still holds for phase 3
        s_next, newly_frozen = self.accumulate(grid, receptive, u_next, params)

        grid.commit(s_next, u_next, newly_frozen)

        count = int(np.count_nonzero(newly_frozen))
        logger.debug(f"Diffusion step: receptive={int(np.count_nonzero(receptive))}, "
                     f"newly_frozen={count}")
        return count


class ProbabilisticGrowthRule(GrowthRule):
    """Direct-freeze rule without a vapor field.

    For every frozen cell and each of the six directions, an unfrozen,
    non-border target freezes with probability params.growth_probability.
    All draws are made against the committed mask, so a cell frozen this
    step cannot seed further growth until the next one.
    """

    name = "probabilistic"

    def __init__(self, seed: Optional[int] = None):
        """Initialize the rule.

        Args:
            seed: Random seed; overridden by params.seed on reset when set
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def reset(self, params: GrowthParams) -> None:
        seed = params.seed if params.seed is not None else self.seed
        self.rng = np.random.default_rng(seed)
        logger.debug(f"Probabilistic rule reseeded with {seed}")

    def advance(self, grid: CrystalGrid, params: GrowthParams) -> int:
        frozen = grid.frozen
        topology = grid.topology
        candidates = np.zeros_like(frozen)

        for dx, dy in HEX_DIRECTIONS:
            # cells whose neighbor at (-dx, -dy) is frozen
            reached = topology.shifted(frozen, dx, dy)
            hits = self.rng.random(frozen.shape) < params.growth_probability
            candidates |= reached & hits

        newly_frozen = candidates & ~frozen & grid.interior
        s_next = grid.s.copy()
        s_next[newly_frozen] = FREEZE_THRESHOLD
        s_next[grid.border] = params.beta

        grid.commit(s_next, np.zeros_like(grid.u), newly_frozen)

        count = int(np.count_nonzero(newly_frozen))
        logger.debug(f"Probabilistic step: p={params.growth_probability}, newly_frozen={count}")
        return count


GROWTH_RULES = {
    DiffusionGrowthRule.name: DiffusionGrowthRule,
    ProbabilisticGrowthRule.name: ProbabilisticGrowthRule,
}


def create_growth_rule(name: str, seed: Optional[int] = None) -> GrowthRule:
    """Build a growth rule by name ('diffusion' or 'probabilistic').

    Raises:
        ValueError: If name is not a known rule
    """
    if name == ProbabilisticGrowthRule.name:
        return ProbabilisticGrowthRule(seed)
    if name in GROWTH_RULES:
        return GROWTH_RULES[name]()
    raise ValueError(f"Unknown growth rule: {name!r} (expected one of {sorted(GROWTH_RULES)})")
