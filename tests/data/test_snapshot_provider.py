"""Tests for the JSON snapshot provider, static provider and factory."""

from __future__ import annotations

import json
import math
from pathlib import Path

import pytest

from ratecurves.data.constants import PROTOCOL_KAMINO, SOL, TOKEN_MINTS, USDC
from ratecurves.data.interfaces import (
    CurvePoint,
    ReserveDataProvider,
    ReserveRateConfig,
    TokenDescriptor,
)
from ratecurves.data.provider_factory import create_provider
from ratecurves.data.snapshot_provider import (
    SnapshotDataProvider,
    _bps_to_float,
    _parse_curve,
    _pct_to_float,
)
from ratecurves.data.static_params import StaticDataProvider
from ratecurves.protocol.assembler import build_market_curves
from ratecurves.protocol.errors import MarketLoadError, ReserveNotFoundError

SOL_MINT = TOKEN_MINTS[SOL]
USDC_MINT = TOKEN_MINTS[USDC]


def _points(*pairs: tuple[int, int]) -> list[dict[str, int]]:
    return [{"utilizationRateBps": u, "borrowRateBps": r} for u, r in pairs]


SNAPSHOT = {
    "market": "7u3HeHxYDLhnCoErrtycNokbQYbWGzLs6JSDqGAv5PfF",
    "reserves": [
        {
            "symbol": "SOL",
            "mint": SOL_MINT,
            "slotAdjustmentFactor": 1.0,
            "config": {
                "protocolTakeRatePct": 15,
                "hostFixedInterestRateBps": 50,
                "borrowRateCurve": {
                    # Trailing slots padded with the last point
                    "points": _points(
                        (0, 0), (8000, 2000), (10000, 10000), (10000, 10000), (10000, 10000)
                    )
                },
            },
        },
        {
            "symbol": "USDC",
            "mint": USDC_MINT,
            "slotAdjustmentFactor": 1.0,
            "config": {
                "protocolTakeRatePct": 20,
                "borrowRateCurve": {"points": _points((0, 0))},
            },
        },
        {"symbol": "NOMINT"},
    ],
}


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "market.json"
    path.write_text(json.dumps(SNAPSHOT))
    return path


@pytest.fixture
def provider(snapshot_file: Path) -> SnapshotDataProvider:
    p = SnapshotDataProvider(snapshot_file)
    p.load_market()
    return p


class TestUnitConversions:
    def test_bps_to_float_zero(self):
        assert _bps_to_float(0) == 0.0

    def test_bps_to_float_full(self):
        assert _bps_to_float(10_000) == 1.0

    def test_bps_to_float_rate(self):
        assert math.isclose(_bps_to_float(2000), 0.2)

    def test_pct_to_float(self):
        assert math.isclose(_pct_to_float(15), 0.15)

    def test_curve_padding_dropped(self):
        curve = _parse_curve(_points((0, 0), (10000, 5000), (10000, 5000)))
        assert curve == (CurvePoint(0.0, 0.0), CurvePoint(1.0, 0.5))


class TestSnapshotDataProvider:
    def test_is_provider(self, provider: SnapshotDataProvider):
        assert isinstance(provider, ReserveDataProvider)
        assert provider.protocol_label == PROTOCOL_KAMINO
        assert provider.market == SNAPSHOT["market"]

    def test_list_tokens_skips_reserves_without_mint(self, provider: SnapshotDataProvider):
        tokens = provider.list_tokens()
        assert [t.symbol for t in tokens] == ["SOL", "USDC"]

    def test_reserve_config_decoded(self, provider: SnapshotDataProvider):
        config = provider.get_reserve_config(TokenDescriptor("SOL", SOL_MINT))
        assert isinstance(config, ReserveRateConfig)
        assert len(config.curve_points) == 3
        assert config.curve_points[1] == CurvePoint(0.8, 0.2)
        assert math.isclose(config.protocol_take_rate, 0.15)
        assert math.isclose(config.fixed_host_interest_rate, 0.005)
        assert config.slot_adjustment_factor == 1.0

    def test_host_rate_defaults_to_zero(self, provider: SnapshotDataProvider):
        config = provider.get_reserve_config(TokenDescriptor("USDC", USDC_MINT))
        assert config.fixed_host_interest_rate == 0.0

    def test_unknown_mint(self, provider: SnapshotDataProvider):
        with pytest.raises(ReserveNotFoundError):
            provider.get_reserve_config(TokenDescriptor("WIF", "mint-wif"))

    def test_lazy_load(self, snapshot_file: Path):
        p = SnapshotDataProvider(snapshot_file)
        assert len(p.list_tokens()) == 2

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MarketLoadError):
            SnapshotDataProvider(tmp_path / "missing.json").load_market()

    def test_lazy_load_missing_file(self, tmp_path: Path):
        p = SnapshotDataProvider(tmp_path / "missing.json")
        with pytest.raises(MarketLoadError):
            p.list_tokens()
        with pytest.raises(MarketLoadError):
            p.get_reserve_config(TokenDescriptor("SOL", "mint-sol"))

    def test_lazy_load_empty_reserves(self, tmp_path: Path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"market": "x", "reserves": []}))
        p = SnapshotDataProvider(path)
        assert p.list_tokens() == []
        with pytest.raises(ReserveNotFoundError):
            p.get_reserve_config(TokenDescriptor("SOL", "mint-sol"))

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(MarketLoadError):
            SnapshotDataProvider(path).load_market()

    def test_missing_reserves(self, tmp_path: Path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"market": "x"}))
        with pytest.raises(MarketLoadError):
            SnapshotDataProvider(path).load_market()

    def test_market_curves_skip_degenerate_reserve(self, provider: SnapshotDataProvider):
        # USDC has a single curve point
        curves = build_market_curves(provider, step_fraction=0.1)
        assert list(curves) == ["Kamino_SOL"]
        borrow = curves["Kamino_SOL"].borrow_rates.values
        assert borrow[4] == pytest.approx(0.10 + 0.005)


class TestStaticDataProvider:
    def test_all_tokens_evaluate(self):
        provider = StaticDataProvider()
        curves = build_market_curves(provider)
        assert len(curves) == len(provider.list_tokens())

    def test_unknown_mint(self):
        with pytest.raises(ReserveNotFoundError):
            StaticDataProvider().get_reserve_config(TokenDescriptor("SOL", "not-a-mint"))

    def test_curves_span_full_domain(self):
        provider = StaticDataProvider()
        for token in provider.list_tokens():
            points = provider.get_reserve_config(token).curve_points
            assert points[0].utilization == 0.0
            assert points[-1].utilization == 1.0
            assert all(b.utilization > a.utilization for a, b in zip(points, points[1:]))


class TestCreateProvider:
    def test_default_is_static(self):
        assert isinstance(create_provider(), StaticDataProvider)

    def test_snapshot_from_argument(self, snapshot_file: Path):
        provider = create_provider(use_snapshot=True, snapshot_path=str(snapshot_file))
        assert isinstance(provider, SnapshotDataProvider)

    def test_snapshot_from_env(self, snapshot_file: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("KAMINO_SNAPSHOT_PATH", str(snapshot_file))
        assert isinstance(create_provider(use_snapshot=True), SnapshotDataProvider)

    def test_fallback_without_path(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("KAMINO_SNAPSHOT_PATH", raising=False)
        assert isinstance(create_provider(use_snapshot=True), StaticDataProvider)

    def test_strict_without_path(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("KAMINO_SNAPSHOT_PATH", raising=False)
        with pytest.raises(MarketLoadError):
            create_provider(use_snapshot=True, strict=True)
