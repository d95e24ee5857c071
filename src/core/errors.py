"""Error types raised by the crystal growth core.

Two failure classes exist: a bad configuration, caught when an automaton is
built or reset, and a failed per-step buffer allocation, which rejects the
whole step before anything is committed.
"""


class CrystalConfigError(ValueError):
    """Grid size, border margin or growth parameter outside its supported range."""


class StepResourceError(RuntimeError):
    """A transient buffer for step() could not be allocated.

    The grid is left exactly as it was before the failed call.
    """
