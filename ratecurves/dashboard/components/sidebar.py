"""Sidebar parameter controls."""

from dataclasses import dataclass

import streamlit as st

from ratecurves.protocol.knots import DEFAULT_STEP


@dataclass
class SidebarParams:
    """User-controlled parameters from the sidebar."""

    step_fraction: float
    lower: float
    upper: float


def render_sidebar() -> SidebarParams:
    """Render sidebar controls and return selected parameters."""
    # Data source toggle and refresh button are rendered in app.py

    st.sidebar.header("Sampling")

    step_pct = st.sidebar.number_input(
        "Knot Step (%)",
        min_value=0.1,
        max_value=100.0,
        value=DEFAULT_STEP * 100,
        step=0.5,
        format="%.1f",
    )

    st.sidebar.header("Utilization Range")

    lower = st.sidebar.number_input(
        "Lower Limit (%)", min_value=0.0, max_value=100.0, value=0.0, step=0.1
    )
    upper = st.sidebar.number_input(
        "Upper Limit (%)", min_value=0.0, max_value=100.0, value=100.0, step=0.1
    )
    if lower > upper:
        st.sidebar.warning("Lower limit is above upper limit; swapping them.")
        lower, upper = upper, lower

    return SidebarParams(step_fraction=step_pct / 100.0, lower=lower, upper=upper)
