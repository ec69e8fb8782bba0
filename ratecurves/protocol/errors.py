"""Exceptions raised while building rate curves."""


class CurveError(Exception):
    """Base class for rate-curve failures."""


class InvalidStepError(CurveError, ValueError):
    """Sampling step outside (0, 1]. Aborts the whole batch."""


class DegenerateCurveError(CurveError):
    """Curve has fewer than two points or a zero-width segment."""


class ReserveNotFoundError(CurveError, LookupError):
    """No reserve in the market matches the requested token."""


class NumericError(CurveError, ArithmeticError):
    """Interpolation or compounding produced a non-finite value."""


class MarketLoadError(CurveError):
    """The market snapshot could not be loaded at all."""
