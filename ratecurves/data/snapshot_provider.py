"""Data provider reading a Kamino market snapshot exported as JSON.

The snapshot mirrors the on-chain reserve layout::

    {
      "market": "7u3HeHxYDLhnCoErrtycNokbQYbWGzLs6JSDqGAv5PfF",
      "reserves": [
        {
          "symbol": "SOL",
          "mint": "So11111111111111111111111111111111111111112",
          "slotAdjustmentFactor": 1.0,
          "config": {
            "protocolTakeRatePct": 15,
            "hostFixedInterestRateBps": 0,
            "borrowRateCurve": {
              "points": [
                {"utilizationRateBps": 0, "borrowRateBps": 0},
                {"utilizationRateBps": 10000, "borrowRateBps": 10000}
              ]
            }
          }
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ratecurves.data.constants import PROTOCOL_KAMINO
from ratecurves.data.interfaces import (
    CurvePoint,
    ReserveDataProvider,
    ReserveRateConfig,
    TokenDescriptor,
)
from ratecurves.protocol.errors import MarketLoadError, ReserveNotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _bps_to_float(bps: int) -> float:
    """Convert basis points (1e4 scale) to a decimal fraction."""
    return bps / 10_000


def _pct_to_float(pct: int) -> float:
    """Convert an integer percentage to a decimal fraction."""
    return pct / 100


def _parse_curve(raw_points: list[dict[str, Any]]) -> tuple[CurvePoint, ...]:
    """Decode on-chain curve points.

    On-chain curves have a fixed number of slots; unused slots repeat the last
    real point and are dropped here.
    """
    points: list[CurvePoint] = []
    for raw in raw_points:
        point = CurvePoint(
            utilization=_bps_to_float(raw["utilizationRateBps"]),
            rate=_bps_to_float(raw["borrowRateBps"]),
        )
        if points and point == points[-1]:
            continue
        points.append(point)
    return tuple(points)


def _parse_reserve(raw: dict[str, Any]) -> ReserveRateConfig:
    config = raw["config"]
    return ReserveRateConfig(
        curve_points=_parse_curve(config["borrowRateCurve"]["points"]),
        protocol_take_rate=_pct_to_float(config["protocolTakeRatePct"]),
        slot_adjustment_factor=float(raw["slotAdjustmentFactor"]),
        fixed_host_interest_rate=_bps_to_float(config.get("hostFixedInterestRateBps", 0)),
    )


# ---------------------------------------------------------------------------
# SnapshotDataProvider
# ---------------------------------------------------------------------------

class SnapshotDataProvider(ReserveDataProvider):
    """Reserve data from a JSON market snapshot.

    Parameters
    ----------
    path : str | Path
        Location of the snapshot file.
    protocol_label : str
        Prefix used for curve keys (default ``"Kamino"``).
    """

    def __init__(self, path: str | Path, protocol_label: str = PROTOCOL_KAMINO) -> None:
        self._path = Path(path)
        self.protocol_label = protocol_label
        self._reserves: dict[str, dict[str, Any]] | None = None
        self.market: str | None = None

    def load_market(self) -> None:
        self._reserves = self._read_reserves()

    def _read_reserves(self) -> dict[str, dict[str, Any]]:
        try:
            data = json.loads(self._path.read_text())
        except (OSError, ValueError) as exc:
            raise MarketLoadError(f"Cannot read market snapshot {self._path}: {exc}") from exc

        reserves = data.get("reserves") if isinstance(data, dict) else None
        if not isinstance(reserves, list):
            raise MarketLoadError(f"Market snapshot {self._path} has no reserves list")

        self.market = data.get("market")
        loaded: dict[str, dict[str, Any]] = {}
        for raw in reserves:
            mint = raw.get("mint") if isinstance(raw, dict) else None
            if not mint:
                logger.warning("Ignoring snapshot reserve without mint: %r", raw)
                continue
            loaded[mint] = raw
        logger.info("Loaded %d reserves from %s", len(loaded), self._path)
        return loaded

    def _loaded(self) -> dict[str, dict[str, Any]]:
        if self._reserves is None:
            self._reserves = self._read_reserves()
        return self._reserves

    def list_tokens(self) -> list[TokenDescriptor]:
        return [
            TokenDescriptor(symbol=raw.get("symbol") or mint, mint=mint)
            for mint, raw in self._loaded().items()
        ]

    def get_reserve_config(self, token: TokenDescriptor) -> ReserveRateConfig:
        raw = self._loaded().get(token.mint)
        if raw is None:
            raise ReserveNotFoundError(f"No reserve for mint {token.symbol}")
        return _parse_reserve(raw)
