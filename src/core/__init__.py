"""
Crystal growth core.

Hex topology, cell grid, growth parameters, growth rules and the automaton
that ties them together.
"""

from .automaton import CrystalAutomaton, create_automaton
from .crystal_grid import CrystalGrid, FREEZE_THRESHOLD
from .errors import CrystalConfigError, StepResourceError
from .growth_params import GrowthParams
from .growth_rules import (
    GrowthRule, DiffusionGrowthRule, ProbabilisticGrowthRule, create_growth_rule
)
from .hex_topology import HexTopology, HEX_DIRECTIONS, hex_distance, rotate_60

__all__ = [
    'CrystalAutomaton',
    'create_automaton',
    'CrystalGrid',
    'FREEZE_THRESHOLD',
    'CrystalConfigError',
    'StepResourceError',
    'GrowthParams',
    'GrowthRule',
    'DiffusionGrowthRule',
    'ProbabilisticGrowthRule',
    'create_growth_rule',
    'HexTopology',
    'HEX_DIRECTIONS',
    'hex_distance',
    'rotate_60',
]
