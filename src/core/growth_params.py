"""Tunable growth parameters.

GrowthParams is the single configuration object shared by the automaton and
whatever front end edits it. Construction-time checks are strict (a bad value
is a CrystalConfigError); live edits through the set_* methods are clamped
into range instead.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple
import logging

from .errors import CrystalConfigError

logger = logging.getLogger(__name__)


# Above alpha = 2 the diffusion update stops being a convex combination and
# s can go negative.
ALPHA_RANGE: Tuple[float, float] = (0.5, 2.0)
BETA_RANGE: Tuple[float, float] = (0.1, 0.9)
GAMMA_RANGE: Tuple[float, float] = (0.0, 0.1)
PROBABILITY_RANGE: Tuple[float, float] = (0.0, 1.0)

DEFAULT_ALPHA = 1.0
DEFAULT_BETA = 0.5
DEFAULT_GAMMA = 0.01
DEFAULT_GROWTH_PROBABILITY = 0.35

PARAM_RANGES: Dict[str, Tuple[float, float]] = {
    'alpha': ALPHA_RANGE,
    'beta': BETA_RANGE,
    'gamma': GAMMA_RANGE,
    'growth_probability': PROBABILITY_RANGE,
}


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    """Clamp value into the closed interval bounds."""
    low, high = bounds
    return max(low, min(high, float(value)))


@dataclass
class GrowthParams:
    """Growth rule parameters.

    Attributes:
        alpha: Diffusion rate
        beta: Ambient vapor level, also the border ring value
        gamma: Background vapor added to receptive cells per step
        growth_probability: Per-direction freeze chance for the probabilistic rule
        seed: Random seed for the probabilistic rule (None = fresh entropy)
    """
    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    gamma: float = DEFAULT_GAMMA
    growth_probability: float = DEFAULT_GROWTH_PROBABILITY
    seed: Optional[int] = None

    def validate(self) -> 'GrowthParams':
        """Check every parameter against its range.

        Returns:
            self, for chaining

        Raises:
            CrystalConfigError: If any parameter is out of range
        """
        for name, (low, high) in PARAM_RANGES.items():
            value = getattr(self, name)
            if not (low <= value <= high):
                raise CrystalConfigError(
                    f"Parameter {name}={value} outside supported range [{low}, {high}]"
                )
        if self.seed is not None and self.seed < 0:
            raise CrystalConfigError(f"Seed must be non-negative, got {self.seed}")
        return self

    def snapshot(self) -> 'GrowthParams':
        """Independent copy used for the duration of one step."""
        return replace(self)

    def _set_clamped(self, name: str, value: float) -> float:
        clamped = clamp(value, PARAM_RANGES[name])
        if clamped != value:
            logger.debug(f"Clamped {name}={value} to {clamped}")
        setattr(self, name, clamped)
        return clamped

    def set_alpha(self, value: float) -> float:
        """Set alpha, clamped to ALPHA_RANGE. Returns the stored value."""
        return self._set_clamped('alpha', value)

    def set_beta(self, value: float) -> float:
        """Set beta, clamped to BETA_RANGE. Returns the stored value."""
        return self._set_clamped('beta', value)

    def set_gamma(self, value: float) -> float:
        """Set gamma, clamped to GAMMA_RANGE. Returns the stored value."""
        return self._set_clamped('gamma', value)

    def set_growth_probability(self, value: float) -> float:
        """Set growth_probability, clamped to [0, 1]. Returns the stored value."""
        return self._set_clamped('growth_probability', value)

    def to_dict(self) -> Dict[str, object]:
        return {
            'alpha': self.alpha,
            'beta': self.beta,
            'gamma': self.gamma,
            'growth_probability': self.growth_probability,
            'seed': self.seed,
        }
