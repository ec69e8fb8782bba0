"""Reusable Plotly chart components."""

import pandas as pd
import plotly.graph_objects as go


def rate_curve_chart(
    df: pd.DataFrame,
    current_utilization: float | None = None,
    title: str = "Interest Rate Curve",
) -> go.Figure:
    """Create an interactive rate curve chart.

    Args:
        df: DataFrame with columns: utilization, borrow_rate, supply_rate.
        current_utilization: If provided, marks current utilization on chart.
        title: Chart title.
    """
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=df["utilization"] * 100,
            y=df["borrow_rate"] * 100,
            name="Borrow APY",
            line=dict(color="#ef4444", width=2),
            hovertemplate="Utilization: %{x:.1f}%<br>Borrow APY: %{y:.2f}%<extra></extra>",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=df["utilization"] * 100,
            y=df["supply_rate"] * 100,
            name="Lending APY",
            line=dict(color="#22c55e", width=2),
            hovertemplate="Utilization: %{x:.1f}%<br>Lending APY: %{y:.2f}%<extra></extra>",
        )
    )

    if current_utilization is not None:
        fig.add_vline(
            x=current_utilization * 100,
            line_dash="dash",
            line_color="#6b7280",
            annotation_text=f"Current: {current_utilization*100:.1f}%",
        )

    fig.update_layout(
        title=title,
        xaxis_title="Utilization (%)",
        yaxis_title="APY (%)",
        hovermode="x unified",
        template="plotly_dark",
        height=450,
    )

    return fig


def curve_comparison_chart(
    df: pd.DataFrame,
    label_a: str,
    label_b: str,
    title: str = "Curve Comparison",
) -> go.Figure:
    """Overlay the borrow and lending curves of two selections.

    Args:
        df: Output of ``merge_series`` (x in percent, rates as fractions).
        label_a: Legend label of the first selection.
        label_b: Legend label of the second selection.
    """
    fig = go.Figure()

    traces = [
        ("a_borrow", f"{label_a} borrow", "#ef4444", "solid"),
        ("a_lend", f"{label_a} lend", "#22c55e", "solid"),
        ("b_borrow", f"{label_b} borrow", "#f59e0b", "dash"),
        ("b_lend", f"{label_b} lend", "#3b82f6", "dash"),
    ]
    for column, name, color, dash in traces:
        if column not in df or df[column].isna().all():
            continue
        fig.add_trace(
            go.Scatter(
                x=df["x"],
                y=df[column] * 100,
                name=name,
                connectgaps=True,
                line=dict(color=color, width=2, dash=dash),
                hovertemplate=f"Utilization: %{{x:.1f}}%<br>{name}: %{{y:.2f}}%<extra></extra>",
            )
        )

    fig.update_layout(
        title=title,
        xaxis_title="Utilization (%)",
        yaxis_title="APY (%)",
        hovermode="x unified",
        template="plotly_dark",
        height=500,
    )

    return fig
