"""Kamino-style piecewise linear interest rate model.

The borrow curve is a list of (utilization, rate) vertices. Rates between
vertices are linearly interpolated, compounded over the reserve's slot
adjustment factor and shifted by the fixed host rate.
"""

import math

import numpy as np
import pandas as pd

from ratecurves.data.interfaces import ReserveRateConfig
from ratecurves.protocol.errors import DegenerateCurveError, NumericError


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise NumericError(f"{what} is not finite: {value}")
    return value


def interpolate_rate(config: ReserveRateConfig, utilization: float) -> float:
    """Per-period borrow rate at *utilization* before compounding.

    Utilization outside the curve's domain is clamped to the nearest end
    point's rate.
    """
    points = config.curve_points
    if len(points) < 2:
        raise DegenerateCurveError(
            f"Borrow curve needs at least 2 points, got {len(points)}"
        )
    for lo, hi in zip(points, points[1:]):
        if not hi.utilization > lo.utilization:
            raise DegenerateCurveError(
                f"Curve utilizations must be strictly increasing, got "
                f"{lo.utilization} then {hi.utilization}"
            )
    _finite(utilization, "utilization")

    first, last = points[0], points[-1]
    if utilization <= first.utilization:
        return _finite(first.rate, "rate")
    if utilization >= last.utilization:
        return _finite(last.rate, "rate")

    # Sorted and inside (first, last), so some segment brackets utilization
    lo, hi = next(
        (lo, hi) for lo, hi in zip(points, points[1:]) if utilization <= hi.utilization
    )
    width = hi.utilization - lo.utilization
    rate = lo.rate + (utilization - lo.utilization) / width * (hi.rate - lo.rate)
    return _finite(rate, "interpolated rate")


def evaluate(config: ReserveRateConfig, utilization: float) -> tuple[float, float]:
    """Lending and borrow APY for a reserve at a given utilization.

    borrow = (1 + r) ** slot_adjustment_factor - 1 + fixed_host_interest_rate
    lending = borrow * U * (1 - protocol_take_rate)

    Args:
        config: Reserve rate-curve configuration.
        utilization: Pool utilization ratio in [0, 1].

    Returns:
        ``(lending_apy, borrow_apy)`` as decimals (e.g. 0.05 = 5%).

    Raises:
        DegenerateCurveError: Fewer than 2 curve points, or utilizations that
            are not strictly increasing.
        NumericError: Any intermediate value is not a finite real number.
    """
    rate = interpolate_rate(config, utilization)

    try:
        compounded = math.pow(1.0 + rate, config.slot_adjustment_factor)
    except (OverflowError, ValueError) as exc:
        raise NumericError(
            f"Cannot compound rate={rate} over {config.slot_adjustment_factor} periods"
        ) from exc
    borrow_apy = _finite(compounded - 1.0, "borrow APY")
    borrow_apy = _finite(borrow_apy + config.fixed_host_interest_rate, "borrow APY")

    lending_apy = borrow_apy * utilization * (1.0 - config.protocol_take_rate)
    return _finite(lending_apy, "lending APY"), borrow_apy


class RateCurveModel:
    """Rate model bound to one reserve configuration."""

    def __init__(self, config: ReserveRateConfig) -> None:
        self.config = config

    def borrow_rate(self, utilization: float) -> float:
        """Interpolated per-period borrow rate (not annualized)."""
        return interpolate_rate(self.config, utilization)

    def borrow_apy(self, utilization: float) -> float:
        return evaluate(self.config, utilization)[1]

    def lending_apy(self, utilization: float) -> float:
        return evaluate(self.config, utilization)[0]

    def evaluate(self, utilization: float) -> tuple[float, float]:
        return evaluate(self.config, utilization)

    def rate_curve(self, n_points: int = 200) -> pd.DataFrame:
        """Generate a dense rate curve for plotting.

        Returns:
            DataFrame with columns: utilization, borrow_rate, supply_rate
        """
        utilizations = np.linspace(0, 1, n_points)
        pairs = [evaluate(self.config, float(u)) for u in utilizations]

        return pd.DataFrame(
            {
                "utilization": utilizations,
                "borrow_rate": [borrow for _, borrow in pairs],
                "supply_rate": [lend for lend, _ in pairs],
            }
        )
