"""Batch assembly of rate curves across a market's reserves.

Each token is processed independently: its reserve configuration is fetched,
sampled on a shared knot grid and tagged as either a success or a failure.
Failures are logged and dropped from the final map, so a broken reserve never
takes down the rest of the batch.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ratecurves.data.interfaces import (
    ReserveDataProvider,
    ReserveRateConfig,
    TokenDescriptor,
)
from ratecurves.protocol.curve_builder import (
    BorrowCurveRecord,
    CurveEntry,
    build_curve_entry,
)
from ratecurves.protocol.errors import (
    DegenerateCurveError,
    NumericError,
    ReserveNotFoundError,
)
from ratecurves.protocol.knots import DEFAULT_STEP, generate_knots

logger = logging.getLogger(__name__)

CurvesResponse = dict[str, CurveEntry]
ConfigFetcher = Callable[[TokenDescriptor], ReserveRateConfig]


class FailureReason(enum.Enum):
    RESERVE_NOT_FOUND = "reserve_not_found"
    DEGENERATE_CURVE = "degenerate_curve"
    NUMERIC = "numeric"
    FETCH_FAILED = "fetch_failed"
    BUILD_FAILED = "build_failed"


@dataclass(frozen=True)
class CurveResult:
    """Outcome of building the curves for one token."""

    key: str
    symbol: str
    entry: CurveEntry | None = None
    failure: FailureReason | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.entry is not None


def curve_key(protocol: str, token: str) -> str:
    return f"{protocol}_{token}"


def parse_curve_key(key: str) -> tuple[str, str]:
    """Split ``"<protocol>_<token>"`` on the first underscore."""
    protocol, sep, token = key.partition("_")
    if not sep:
        return key, ""
    return protocol, token


def _classify(exc: Exception, default: FailureReason) -> FailureReason:
    if isinstance(exc, ReserveNotFoundError):
        return FailureReason.RESERVE_NOT_FOUND
    if isinstance(exc, DegenerateCurveError):
        return FailureReason.DEGENERATE_CURVE
    if isinstance(exc, NumericError):
        return FailureReason.NUMERIC
    return default


def _evaluate_token(
    token: TokenDescriptor,
    fetch_config: ConfigFetcher,
    protocol_label: str,
    knots: Sequence[float],
) -> CurveResult:
    key = curve_key(protocol_label, token.symbol)

    try:
        config = fetch_config(token)
    except Exception as exc:
        return CurveResult(
            key=key,
            symbol=token.symbol,
            failure=_classify(exc, FailureReason.FETCH_FAILED),
            detail=str(exc),
        )

    try:
        entry = build_curve_entry(config, knots)
    except Exception as exc:
        return CurveResult(
            key=key,
            symbol=token.symbol,
            failure=_classify(exc, FailureReason.BUILD_FAILED),
            detail=str(exc),
        )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Borrow curve: %s", BorrowCurveRecord.from_config(token.symbol, config))
    return CurveResult(key=key, symbol=token.symbol, entry=entry)


def evaluate_tokens(
    tokens: Sequence[TokenDescriptor],
    fetch_config: ConfigFetcher,
    protocol_label: str,
    knots: Sequence[float],
    max_workers: int | None = None,
) -> list[CurveResult]:
    """Build curves for every token, returning one result per token in input order.

    With ``max_workers > 1`` tokens are dispatched on a thread pool; results
    are still returned in input order.
    """
    knots = tuple(knots)

    def _run(token: TokenDescriptor) -> CurveResult:
        return _evaluate_token(token, fetch_config, protocol_label, knots)

    if max_workers is None or max_workers <= 1 or len(tokens) <= 1:
        return [_run(token) for token in tokens]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(_run, tokens))


def fold_results(results: Sequence[CurveResult]) -> CurvesResponse:
    """Collect successful results into a keyed map, logging each failure."""
    out: CurvesResponse = {}
    for result in results:
        if result.entry is None:
            logger.warning(
                "Skipping %s (%s): %s",
                result.symbol,
                result.failure.value if result.failure else "unknown",
                result.detail,
            )
            continue
        out[result.key] = result.entry
    return out


def assemble_curves(
    tokens: Sequence[TokenDescriptor],
    fetch_config: ConfigFetcher,
    protocol_label: str,
    step_fraction: float = DEFAULT_STEP,
    max_workers: int | None = None,
) -> CurvesResponse:
    """Build the keyed curve map for a batch of tokens.

    Keys look like ``"Kamino_SOL"``. Tokens whose reserve cannot be fetched or
    evaluated are logged and left out.

    Raises:
        InvalidStepError: If ``step_fraction`` is outside (0, 1]. Raised
            before any token is processed.
    """
    knots = generate_knots(step_fraction)
    results = evaluate_tokens(tokens, fetch_config, protocol_label, knots, max_workers)
    curves = fold_results(results)
    logger.info(
        "Built %d/%d %s curves with %d knots",
        len(curves),
        len(tokens),
        protocol_label,
        len(knots),
    )
    return curves


def build_market_curves(
    provider: ReserveDataProvider,
    step_fraction: float = DEFAULT_STEP,
    symbols: Sequence[str] = (),
    max_workers: int | None = None,
) -> CurvesResponse:
    """Load the provider's market and build curves for its reserves.

    Args:
        provider: Source of the market snapshot and reserve configurations.
        step_fraction: Knot spacing as a fraction of 1.
        symbols: Optional symbol filter; empty means every token.
        max_workers: Thread count for per-token evaluation.

    Raises:
        InvalidStepError: If ``step_fraction`` is outside (0, 1].
        MarketLoadError: If the market snapshot cannot be loaded.
    """
    # Reject a bad step before touching the market
    generate_knots(step_fraction)
    provider.load_market()

    tokens = provider.list_tokens()
    if symbols:
        wanted = set(symbols)
        tokens = [t for t in tokens if t.symbol in wanted]

    return assemble_curves(
        tokens,
        provider.get_reserve_config,
        provider.protocol_label,
        step_fraction,
        max_workers,
    )
