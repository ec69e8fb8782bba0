"""Abstract reserve data provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CurvePoint:
    """One vertex of a piecewise-linear borrow curve."""

    utilization: float  # Fraction in [0, 1]
    rate: float  # Per-period borrow rate as a fraction


@dataclass(frozen=True)
class ReserveRateConfig:
    """Rate-curve configuration of a single reserve."""

    curve_points: tuple[CurvePoint, ...]
    protocol_take_rate: float  # Share of interest kept by the protocol, [0, 1]
    slot_adjustment_factor: float  # Compounding exponent (~periods per year)
    fixed_host_interest_rate: float = 0.0  # Additive annual spread


@dataclass(frozen=True)
class TokenDescriptor:
    """A token to include in a curve batch."""

    symbol: str
    mint: str  # On-chain mint address


class ReserveDataProvider(ABC):
    """Abstract interface for lending market reserve data."""

    protocol_label: str = ""

    @abstractmethod
    def load_market(self) -> None:
        """Load the market snapshot.

        Raises:
            MarketLoadError: If the snapshot cannot be obtained.
        """

    @abstractmethod
    def list_tokens(self) -> list[TokenDescriptor]:
        """Tokens with a reserve in the loaded market."""

    @abstractmethod
    def get_reserve_config(self, token: TokenDescriptor) -> ReserveRateConfig:
        """Get the rate-curve configuration for a token's reserve.

        Raises:
            ReserveNotFoundError: If no reserve matches the token's mint.
        """
