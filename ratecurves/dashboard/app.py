"""Lending Rate Curves: main Streamlit entry point."""

import logging
import os

import pandas as pd
import streamlit as st

from ratecurves.config import load_env_file

logger = logging.getLogger(__name__)

# Load .env file if present (for KAMINO_SNAPSHOT_PATH, etc.)
load_env_file()

# Bridge Streamlit Cloud secrets into os.environ so the provider factory
# can read them via os.environ.get().
try:
    for key in st.secrets:
        if isinstance(st.secrets[key], str):
            os.environ.setdefault(key, st.secrets[key])
except Exception:
    logger.debug("No Streamlit secrets configured")

from ratecurves.dashboard.components.charts import curve_comparison_chart, rate_curve_chart
from ratecurves.dashboard.components.series import merge_series, protocols, tokens_by_protocol
from ratecurves.dashboard.components.sidebar import render_sidebar
from ratecurves.data.interfaces import ReserveDataProvider
from ratecurves.data.provider_factory import create_provider
from ratecurves.protocol.assembler import build_market_curves, curve_key, parse_curve_key
from ratecurves.protocol.curve_builder import BorrowCurveRecord
from ratecurves.protocol.errors import CurveError
from ratecurves.protocol.interest_rate import RateCurveModel


def _select_series(curves: dict, slot: int, default_key: str) -> str:
    """Protocol/token selectors for one series; returns the selected key."""
    options = protocols(curves)
    tokens = tokens_by_protocol(curves)
    default_protocol, default_token = parse_curve_key(default_key)

    c1, c2 = st.columns(2)
    with c1:
        protocol = st.selectbox(
            f"Protocol {slot}",
            options,
            index=options.index(default_protocol) if default_protocol in options else 0,
            key=f"protocol_{slot}",
        )
    token_options = tokens.get(protocol, [])
    with c2:
        token = st.selectbox(
            f"Token {slot}",
            token_options,
            index=token_options.index(default_token) if default_token in token_options else 0,
            key=f"token_{slot}",
        )
    return curve_key(protocol, token or "")


def _render_comparison(curves: dict, lower: float, upper: float) -> None:
    keys = list(curves)
    col1, col2 = st.columns(2)
    with col1:
        key_a = _select_series(curves, 1, keys[0])
    with col2:
        key_b = _select_series(curves, 2, keys[1] if len(keys) > 1 else keys[0])

    df = merge_series(curves, key_a, key_b, lower=lower, upper=upper)
    if df.empty:
        st.info("No points in the selected utilization range.")
        return

    fig = curve_comparison_chart(df, key_a, key_b, title=f"{key_a} vs {key_b}")
    st.plotly_chart(fig, use_container_width=True)

    table = df.copy()
    for column in ["a_borrow", "a_lend", "b_borrow", "b_lend"]:
        table[column] = table[column] * 100
    table.columns = [
        "Utilization (%)",
        f"{key_a} Borrow (%)",
        f"{key_a} Lend (%)",
        f"{key_b} Borrow (%)",
        f"{key_b} Lend (%)",
    ]
    st.dataframe(table, use_container_width=True, hide_index=True)


def _render_reserve_detail(provider: ReserveDataProvider) -> None:
    try:
        tokens = provider.list_tokens()
    except CurveError as exc:
        st.error(f"Cannot list reserves: {exc}")
        return
    if not tokens:
        st.info("Market has no reserves.")
        return

    symbol = st.selectbox("Reserve", [t.symbol for t in tokens], key="detail_token")
    token = next(t for t in tokens if t.symbol == symbol)

    try:
        config = provider.get_reserve_config(token)
        model = RateCurveModel(config)
        df = model.rate_curve()
    except (CurveError, KeyError, ValueError) as exc:
        st.error(f"Cannot evaluate {symbol}: {exc}")
        return

    fig = rate_curve_chart(df, title=f"{provider.protocol_label} {symbol} Rate Curve")
    st.plotly_chart(fig, use_container_width=True)

    c1, c2, c3 = st.columns(3)
    c1.metric("Protocol Take Rate", f"{config.protocol_take_rate*100:.1f}%")
    c2.metric("Slot Adjustment Factor", f"{config.slot_adjustment_factor:.4f}")
    c3.metric("Fixed Host Rate", f"{config.fixed_host_interest_rate*100:.2f}%")

    record = BorrowCurveRecord.from_config(symbol, config)
    st.subheader("On-chain Borrow Curve")
    st.table(
        pd.DataFrame(
            {"Utilization (%)": record.knots, "Borrow Rate (%)": record.values}
        )
    )


def main() -> None:
    st.set_page_config(
        page_title="Lending Rate Curves",
        page_icon="📈",
        layout="wide",
    )

    st.title("Lending Rate Curves")
    st.caption("Borrow and lending APY by utilization")

    st.sidebar.header("Data Source")
    use_snapshot = st.sidebar.checkbox("Use Market Snapshot", value=False, key="use_snapshot")
    provider = create_provider(use_snapshot=use_snapshot)
    st.sidebar.caption(f"Provider: {type(provider).__name__}")

    params = render_sidebar()

    request = (use_snapshot, params.step_fraction)
    refresh = st.sidebar.button("Refresh Curves")
    if refresh or st.session_state.get("curves_request") != request:
        try:
            st.session_state["curves"] = build_market_curves(
                provider, step_fraction=params.step_fraction
            )
            st.session_state["curves_request"] = request
        except CurveError as exc:
            st.error(f"Failed to load curves: {exc}")
            return

    curves = st.session_state.get("curves", {})

    tab1, tab2 = st.tabs(["Curve Builder", "Reserve Detail"])

    with tab1:
        if not curves:
            st.warning("No curves available for this market.")
        else:
            _render_comparison(curves, params.lower, params.upper)

    with tab2:
        _render_reserve_detail(provider)


if __name__ == "__main__":
    main()
