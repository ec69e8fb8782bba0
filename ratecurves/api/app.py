"""HTTP API serving discretized rate curves as JSON."""

from __future__ import annotations

import logging
import math

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from ratecurves.config import Settings, load_env_file
from ratecurves.data.interfaces import ReserveDataProvider
from ratecurves.data.provider_factory import create_provider
from ratecurves.protocol.assembler import build_market_curves
from ratecurves.protocol.errors import InvalidStepError, MarketLoadError
from ratecurves.protocol.knots import DEFAULT_STEP

logger = logging.getLogger(__name__)


def parse_step(raw: str | None) -> float:
    """Parse the ``step`` query value, defaulting when missing or not a number."""
    if raw is None or not raw.strip():
        return DEFAULT_STEP
    try:
        step = float(raw)
    except ValueError:
        return DEFAULT_STEP
    if math.isnan(step):
        return DEFAULT_STEP
    return step


def create_app(
    settings: Settings | None = None,
    provider: ReserveDataProvider | None = None,
) -> FastAPI:
    """Build the API application.

    Parameters
    ----------
    settings : Settings | None
        Runtime settings; read from the environment per request when omitted.
    provider : ReserveDataProvider | None
        Fixed data provider. When omitted a provider is created per request
        from the settings, so a missing snapshot path surfaces as a 500.
    """
    app = FastAPI(title="Lending Rate Curves")

    def _settings() -> Settings:
        return settings if settings is not None else Settings.from_env()

    @app.get("/api/curves")
    def get_curves(step: str | None = Query(default=None)) -> JSONResponse:
        step_fraction = parse_step(step)
        try:
            cfg = _settings()
            source = provider or create_provider(
                use_snapshot=cfg.use_snapshot,
                snapshot_path=cfg.snapshot_path,
                strict=True,
            )
            curves = build_market_curves(
                source,
                step_fraction=step_fraction,
                symbols=cfg.tokens,
                max_workers=cfg.max_workers,
            )
        except (InvalidStepError, MarketLoadError) as exc:
            logger.error("Failed to load curves: %s", exc)
            return JSONResponse({"error": str(exc)}, status_code=500)
        except Exception as exc:
            logger.exception("Failed to load protocol curves")
            return JSONResponse(
                {"error": str(exc) or "Failed to fetch curves"}, status_code=500
            )

        return JSONResponse(
            {key: entry.to_dict() for key, entry in curves.items()}, status_code=200
        )

    return app


# Load .env file if present (for KAMINO_SNAPSHOT_PATH, etc.)
load_env_file()

app = create_app()


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
