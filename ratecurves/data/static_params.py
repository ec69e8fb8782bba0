"""Static data provider with hardcoded Kamino main-market reserve curves."""

from ratecurves.data.constants import (
    JITOSOL,
    JUP,
    PROTOCOL_KAMINO,
    SOL,
    TOKEN_MINTS,
    USDC,
    USDT,
)
from ratecurves.data.interfaces import (
    CurvePoint,
    ReserveDataProvider,
    ReserveRateConfig,
    TokenDescriptor,
)
from ratecurves.protocol.errors import ReserveNotFoundError

# --- Representative snapshot of Kamino Lend main-market curves ---

_STABLE_CURVE = (
    CurvePoint(utilization=0.0, rate=0.0),
    CurvePoint(utilization=0.8, rate=0.08),
    CurvePoint(utilization=0.9, rate=0.12),
    CurvePoint(utilization=1.0, rate=1.5),
)

_RESERVE_CONFIGS: dict[str, ReserveRateConfig] = {
    SOL: ReserveRateConfig(
        curve_points=(
            CurvePoint(utilization=0.0, rate=0.0),
            CurvePoint(utilization=0.85, rate=0.07),
            CurvePoint(utilization=0.9, rate=0.1),
            CurvePoint(utilization=1.0, rate=1.0),
        ),
        protocol_take_rate=0.15,
        slot_adjustment_factor=1.0,
        fixed_host_interest_rate=0.0,
    ),
    USDC: ReserveRateConfig(
        curve_points=_STABLE_CURVE,
        protocol_take_rate=0.2,
        slot_adjustment_factor=1.0,
        fixed_host_interest_rate=0.0,
    ),
    USDT: ReserveRateConfig(
        curve_points=_STABLE_CURVE,
        protocol_take_rate=0.2,
        slot_adjustment_factor=1.0,
        fixed_host_interest_rate=0.0,
    ),
    JITOSOL: ReserveRateConfig(
        curve_points=(
            CurvePoint(utilization=0.0, rate=0.0),
            CurvePoint(utilization=0.45, rate=0.01),
            CurvePoint(utilization=1.0, rate=0.5),
        ),
        protocol_take_rate=0.1,
        slot_adjustment_factor=1.0,
        fixed_host_interest_rate=0.0,
    ),
    JUP: ReserveRateConfig(
        curve_points=(
            CurvePoint(utilization=0.0, rate=0.0),
            CurvePoint(utilization=0.7, rate=0.15),
            CurvePoint(utilization=1.0, rate=2.0),
        ),
        protocol_take_rate=0.25,
        slot_adjustment_factor=1.0,
        fixed_host_interest_rate=0.01,
    ),
}


class StaticDataProvider(ReserveDataProvider):
    """Data provider using hardcoded Kamino main-market curves."""

    protocol_label = PROTOCOL_KAMINO

    def __init__(self) -> None:
        self._by_mint = {TOKEN_MINTS[symbol]: cfg for symbol, cfg in _RESERVE_CONFIGS.items()}

    def load_market(self) -> None:
        pass

    def list_tokens(self) -> list[TokenDescriptor]:
        return [TokenDescriptor(symbol=s, mint=TOKEN_MINTS[s]) for s in _RESERVE_CONFIGS]

    def get_reserve_config(self, token: TokenDescriptor) -> ReserveRateConfig:
        try:
            return self._by_mint[token.mint]
        except KeyError:
            raise ReserveNotFoundError(f"No reserve for mint {token.symbol}") from None
