"""
Exceptions Module

Domain errors raised by the graph, knowledge and search layers.
"""


class UnsupportedGraphOperation(TypeError):
    """Raised when a restricted graph view rejects a structural mutation."""


class UndefinedTestResult(ArithmeticError):
    """Raised when an independence test cannot produce a p-value (e.g. NaN)."""


class MissingCapability(ValueError):
    """Raised when an algorithm is built or registered without a required test or score."""
