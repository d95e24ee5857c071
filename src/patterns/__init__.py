"""Crystal shape analysis."""

from .crystal_metrics import (
    CrystalMetrics, count_components, is_connected, crystal_radius,
    symmetry_mismatches, measure
)

__all__ = [
    'CrystalMetrics',
    'count_components',
    'is_connected',
    'crystal_radius',
    'symmetry_mismatches',
    'measure',
]
