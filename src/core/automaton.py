"""Snow-crystal cellular automaton.

CrystalAutomaton owns a CrystalGrid, the shared GrowthParams and a growth
rule chosen at construction. A driver calls reset() once, then step()
repeatedly, reading the frozen mask after each step to draw it.
"""

import time
from typing import Dict, List, Optional
import logging

import numpy as np

from .crystal_grid import CrystalGrid
from .errors import StepResourceError
from .growth_params import GrowthParams
from .growth_rules import GrowthRule, DiffusionGrowthRule, create_growth_rule

logger = logging.getLogger(__name__)


class CrystalAutomaton:
    """Diffusion-limited snow-crystal growth on a hex grid.

    Attributes:
        grid: The cell state
        params: Live parameters; edits apply from the next step()
        rule: Growth rule used for every step of this automaton
        stalled_steps: Consecutive steps that froze nothing
        last_step_time: Wall time of the last step() in seconds
    """

    def __init__(self, size: int, params: Optional[GrowthParams] = None,
                 rule: Optional[GrowthRule] = None, border_margin: int = 1):
        """Create and reset an automaton.

        Args:
            size: Grid edge length N
            params: Growth parameters (defaults if None)
            rule: Growth rule (DiffusionGrowthRule if None)
            border_margin: Width of the pinned border ring

        Raises:
            CrystalConfigError: If size, margin or parameters are out of range
        """
        self.params = (params if params is not None else GrowthParams()).validate()
        self.grid = CrystalGrid(size, border_margin)
        self.rule = rule if rule is not None else DiffusionGrowthRule()

        self._step_count = 0
        self.stalled_steps = 0
        self.last_step_time = 0.0

        self.reset()
        logger.debug(f"Created {self.rule.name} automaton {size}x{size}")

    def reset(self, params: Optional[GrowthParams] = None) -> None:
        """Reseed the grid with a single frozen center cell.

        Args:
            params: Replacement parameters, validated strictly; keeps the
                current ones if None

        Raises:
            CrystalConfigError: If params are out of range (nothing is reset)
        """
        if params is not None:
            self.params = params.validate()

        self.grid.reset(self.params.beta)
        self.rule.reset(self.params)
        self._step_count = 0
        self.stalled_steps = 0
        self.last_step_time = 0.0
        logger.info(f"Crystal reset: center={self.grid.center}, beta={self.params.beta}")

    def step(self) -> int:
        """Advance the automaton by one generation.

        Returns:
            Number of cells newly frozen this step

        Raises:
            StepResourceError: If a transient buffer could not be allocated;
                the grid and counters are unchanged
        """
        params = self.params.snapshot()
        start_time = time.time()

        try:
            newly_frozen = self.rule.advance(self.grid, params)
        except MemoryError as e:
            logger.error(f"Step {self._step_count + 1} rejected: buffer allocation failed")
            raise StepResourceError(
                f"Could not allocate step buffers for {self.grid.size}x{self.grid.size} grid"
            ) from e

        self.last_step_time = time.time() - start_time
        self._step_count += 1

        if newly_frozen > 0:
            self.stalled_steps = 0
            logger.debug(f"Step {self._step_count}: froze {newly_frozen} cells "
                         f"({self.frozen_count()} total)")
        else:
            self.stalled_steps += 1
            if self.stalled_steps == 1 and self.frozen_count() > 1:
                logger.warning(f"Step {self._step_count}: no cells frozen, growth may have stalled")

        return newly_frozen

    def step_multiple(self, steps: int, log_interval: Optional[int] = None) -> List[int]:
        """Run several steps.

        Args:
            steps: Number of steps
            log_interval: If given, only every log_interval-th count is returned

        Returns:
            Newly frozen counts (all steps, or at intervals)
        """
        counts = []

        for step_num in range(steps):
            newly_frozen = self.step()

            if log_interval is None or step_num % log_interval == 0:
                counts.append(newly_frozen)

        return counts

    # Read accessors

    def is_frozen(self, x: int, y: int) -> bool:
        return self.grid.is_frozen(x, y)

    def water_content(self, x: int, y: int) -> float:
        return self.grid.water_content(x, y)

    def step_count(self) -> int:
        return self._step_count

    def frozen_count(self) -> int:
        return self.grid.frozen_count()

    def frozen_mask(self) -> np.ndarray:
        """Copy of the frozen mask, indexed [y, x]."""
        return self.grid.frozen.copy()

    def water_grid(self) -> np.ndarray:
        """Copy of the water content field, indexed [y, x]."""
        return self.grid.s.copy()

    # Clamped live parameter edits

    def set_alpha(self, value: float) -> float:
        stored = self.params.set_alpha(value)
        logger.info(f"alpha set to {stored}")
        return stored

    def set_beta(self, value: float) -> float:
        stored = self.params.set_beta(value)
        logger.info(f"beta set to {stored}")
        return stored

    def set_gamma(self, value: float) -> float:
        stored = self.params.set_gamma(value)
        logger.info(f"gamma set to {stored}")
        return stored

    def set_growth_probability(self, value: float) -> float:
        stored = self.params.set_growth_probability(value)
        logger.info(f"growth_probability set to {stored}")
        return stored

    def get_statistics(self) -> Dict[str, object]:
        """Summary of the current automaton state."""
        interior_s = self.grid.s[self.grid.interior]
        return {
            'rule': self.rule.name,
            'size': self.grid.size,
            'step_count': self._step_count,
            'frozen_count': self.frozen_count(),
            'receptive_count': int(np.count_nonzero(self.grid.receptive_mask())),
            'mean_water': float(np.mean(interior_s)),
            'max_water': float(np.max(interior_s)),
            'min_water': float(np.min(interior_s)),
            'stalled_steps': self.stalled_steps,
            'last_step_time': self.last_step_time,
            'params': self.params.to_dict(),
        }

    def __repr__(self) -> str:
        return (f"CrystalAutomaton({self.grid.size}x{self.grid.size}, rule={self.rule.name}, "
                f"step={self._step_count}, frozen={self.frozen_count()})")


def create_automaton(size: int, rule: str = "diffusion", border_margin: int = 1,
                     **params) -> CrystalAutomaton:
    """Factory for an automaton with the named growth rule.

    Args:
        size: Grid edge length
        rule: 'diffusion' or 'probabilistic'
        border_margin: Border ring width
        **params: GrowthParams fields (alpha, beta, gamma, growth_probability, seed)
    """
    growth_params = GrowthParams(**params)
    return CrystalAutomaton(size, growth_params, create_growth_rule(rule, growth_params.seed),
                            border_margin=border_margin)
