"""Discretized borrow/lending curves for a single reserve."""

from collections.abc import Sequence
from dataclasses import dataclass

from ratecurves.data.interfaces import ReserveRateConfig
from ratecurves.protocol.interest_rate import evaluate


@dataclass(frozen=True)
class CurveVector:
    """Rates sampled at percent utilization knots."""

    knots: tuple[float, ...]
    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.knots) != len(self.values):
            raise ValueError(
                f"knots and values differ in length: {len(self.knots)} != {len(self.values)}"
            )
        if any(b <= a for a, b in zip(self.knots, self.knots[1:])):
            raise ValueError("knots must be strictly increasing")

    def to_dict(self) -> dict[str, list[float]]:
        return {"knots": list(self.knots), "values": list(self.values)}


@dataclass(frozen=True)
class CurveEntry:
    """Borrow and lending curves of one reserve, sharing the same knots."""

    borrow_rates: CurveVector
    lending_rates: CurveVector

    def to_dict(self) -> dict[str, dict[str, list[float]]]:
        """JSON wire shape used by the curves endpoint."""
        return {
            "borrowRates": self.borrow_rates.to_dict(),
            "lendingRates": self.lending_rates.to_dict(),
        }


@dataclass(frozen=True)
class BorrowCurveRecord:
    """Raw on-chain borrow curve of a reserve, in percent, for debugging."""

    symbol: str
    knots: tuple[float, ...]
    values: tuple[float, ...]

    @classmethod
    def from_config(cls, symbol: str, config: ReserveRateConfig) -> "BorrowCurveRecord":
        return cls(
            symbol=symbol,
            knots=tuple(p.utilization * 100 for p in config.curve_points),
            values=tuple(p.rate * 100 for p in config.curve_points),
        )


def build_curve_entry(config: ReserveRateConfig, knots: Sequence[float]) -> CurveEntry:
    """Evaluate a reserve's curve at every knot.

    Args:
        config: Reserve rate-curve configuration.
        knots: Percent utilization knots, as produced by ``generate_knots``.

    Errors from the evaluator propagate unchanged; one bad knot fails the
    whole reserve.
    """
    knots = tuple(knots)
    lending_values: list[float] = []
    borrow_values: list[float] = []

    for knot in knots:
        lending_apy, borrow_apy = evaluate(config, knot / 100)
        lending_values.append(lending_apy)
        borrow_values.append(borrow_apy)

    return CurveEntry(
        borrow_rates=CurveVector(knots=knots, values=tuple(borrow_values)),
        lending_rates=CurveVector(knots=knots, values=tuple(lending_values)),
    )
