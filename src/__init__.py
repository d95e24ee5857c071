"""Snow-crystal growth automaton after Reiter's local model."""

__version__ = "0.1.0"
