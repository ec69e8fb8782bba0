"""Tests for the curves HTTP endpoint."""

from __future__ import annotations

import importlib

import pytest
from fastapi.testclient import TestClient

from ratecurves import config
from ratecurves.api import app as api_app
from ratecurves.api.app import create_app, parse_step
from ratecurves.config import Settings
from ratecurves.data.static_params import StaticDataProvider
from ratecurves.protocol.errors import MarketLoadError


class _FailingMarket(StaticDataProvider):
    def load_market(self) -> None:
        raise MarketLoadError("market account not found")


class _BrokenMarket(StaticDataProvider):
    def list_tokens(self):
        raise RuntimeError("boom")


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Settings(), StaticDataProvider()))


class TestParseStep:
    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "nan"])
    def test_defaults(self, raw) -> None:
        assert parse_step(raw) == 0.02

    def test_number(self) -> None:
        assert parse_step("0.10") == 0.1

    def test_out_of_range_passed_through(self) -> None:
        assert parse_step("1.5") == 1.5


class TestCurvesEndpoint:
    def test_default_step(self, client: TestClient) -> None:
        resp = client.get("/api/curves")
        assert resp.status_code == 200
        data = resp.json()
        assert "Kamino_SOL" in data
        entry = data["Kamino_SOL"]
        assert set(entry) == {"borrowRates", "lendingRates"}
        assert len(entry["borrowRates"]["knots"]) == 51
        assert entry["borrowRates"]["knots"] == entry["lendingRates"]["knots"]
        assert len(entry["borrowRates"]["values"]) == 51

    def test_custom_step(self, client: TestClient) -> None:
        data = client.get("/api/curves", params={"step": "0.30"}).json()
        assert data["Kamino_USDC"]["borrowRates"]["knots"] == [0, 30, 60, 90]

    def test_unparseable_step_uses_default(self, client: TestClient) -> None:
        data = client.get("/api/curves", params={"step": "ten"}).json()
        assert len(data["Kamino_SOL"]["lendingRates"]["knots"]) == 51

    @pytest.mark.parametrize("step", ["1.5", "-0.1", "0", "0.00001", "1e-10", "inf"])
    def test_invalid_step_is_error_payload(self, client: TestClient, step: str) -> None:
        resp = client.get("/api/curves", params={"step": step})
        assert resp.status_code == 500
        assert set(resp.json()) == {"error"}

    def test_token_filter(self) -> None:
        app = create_app(Settings(tokens=("SOL",)), StaticDataProvider())
        data = TestClient(app).get("/api/curves").json()
        assert list(data) == ["Kamino_SOL"]

    def test_market_load_failure(self) -> None:
        app = create_app(Settings(), _FailingMarket())
        resp = TestClient(app).get("/api/curves")
        assert resp.status_code == 500
        assert resp.json() == {"error": "market account not found"}

    def test_unexpected_failure(self) -> None:
        app = create_app(Settings(), _BrokenMarket())
        resp = TestClient(app).get("/api/curves")
        assert resp.status_code == 500
        assert resp.json() == {"error": "boom"}

    def test_snapshot_source_without_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("KAMINO_SNAPSHOT_PATH", raising=False)
        app = create_app(Settings(data_source="snapshot"))
        resp = TestClient(app).get("/api/curves")
        assert resp.status_code == 500
        assert "KAMINO_SNAPSHOT_PATH" in resp.json()["error"]

    def test_parallel_workers(self) -> None:
        app = create_app(Settings(max_workers=3), StaticDataProvider())
        sequential = TestClient(create_app(Settings(), StaticDataProvider())).get("/api/curves")
        parallel = TestClient(app).get("/api/curves")
        assert parallel.json() == sequential.json()


class TestModuleApp:
    def test_env_file_loaded_on_import(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple] = []
        monkeypatch.setattr(config, "load_env_file", lambda *args: calls.append(args))
        importlib.reload(api_app)
        assert calls == [()]

        monkeypatch.undo()
        importlib.reload(api_app)

    def test_module_app_serves_curves(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CURVES_DATA_SOURCE", raising=False)
        monkeypatch.delenv("CURVES_TOKENS", raising=False)
        resp = TestClient(api_app.app).get("/api/curves", params={"step": "0.5"})
        assert resp.status_code == 200
        assert resp.json()["Kamino_SOL"]["borrowRates"]["knots"] == [0, 50, 100]
