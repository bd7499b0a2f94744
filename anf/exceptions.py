"""
Exceptions and warnings raised by the fusion engine.
"""


class ANFError(Exception):
    """Base class for all errors raised by ANF."""


class ShapeMismatchError(ANFError, ValueError):
    """Input matrices or weight vectors have inconsistent or invalid dimensions."""


class InvalidParameterError(ANFError, ValueError):
    """A scalar or vector parameter is out of its valid range."""


class NumericInstabilityWarning(RuntimeWarning):
    """
    Non-fatal numeric edge case.

    Emitted when a denominator was clamped, a row had zero mass, or the
    eigen-gap used to select a spectral subspace is degenerate. The
    computation proceeds with the clamped values.
    """
