"""Utilization sampling grid for discretized rate curves."""

import math

from ratecurves.protocol.errors import InvalidStepError

DEFAULT_STEP = 0.02

# Knots carry 2 decimals of percent, so finer steps would repeat knots
MIN_STEP_PERCENT = 0.01


def generate_knots(step_fraction: float = DEFAULT_STEP) -> list[float]:
    """Build percent knots 0..100 for a step given as a fraction.

    ``generate_knots(0.10)`` gives ``[0, 10, ..., 100]``. When the step does
    not divide 100 evenly the last knot stops short of 100, e.g.
    ``generate_knots(0.30)`` gives ``[0, 30, 60, 90]``.

    Args:
        step_fraction: Step size as a fraction of 1, in (0, 1].

    Returns:
        Strictly increasing percent values rounded to 2 decimals.

    Raises:
        InvalidStepError: If the step is not a finite value in (0, 1], or is
            finer than 0.01 percent.
    """
    if not math.isfinite(step_fraction) or step_fraction <= 0 or step_fraction > 1:
        raise InvalidStepError(
            f"Invalid step_fraction={step_fraction}. Expected (0, 1]."
        )

    step_percent = step_fraction * 100
    if step_percent < MIN_STEP_PERCENT:
        raise InvalidStepError(
            f"Invalid step_fraction={step_fraction}. Steps below "
            f"{MIN_STEP_PERCENT}% cannot be represented at 2-decimal precision."
        )
    count = math.floor(100 / step_percent) + 1
    return [round(i * step_percent, 2) for i in range(count)]
