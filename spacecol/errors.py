"""
Exceptions raised by the growth simulation.
"""


class ConfigError(ValueError):
    """Invalid simulation parameters, detected before any work begins."""


class StructuralError(RuntimeError):
    """An internal invariant of the tree or point set was violated."""
