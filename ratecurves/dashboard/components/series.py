"""Helpers turning a curves map into chartable series."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np
import pandas as pd

from ratecurves.protocol.assembler import parse_curve_key
from ratecurves.protocol.curve_builder import CurveEntry

SERIES_COLUMNS = ["x", "a_borrow", "a_lend", "b_borrow", "b_lend"]


def protocols(curves: Mapping[str, CurveEntry]) -> list[str]:
    """Sorted protocol labels present in the curves map."""
    return sorted({parse_curve_key(key)[0] for key in curves})


def tokens_by_protocol(curves: Mapping[str, CurveEntry]) -> dict[str, list[str]]:
    """Sorted token symbols for each protocol."""
    out: dict[str, set[str]] = {}
    for key in curves:
        protocol, token = parse_curve_key(key)
        out.setdefault(protocol, set()).add(token)
    return {protocol: sorted(tokens) for protocol, tokens in out.items()}


def _normalize_knots(knots: Sequence[float]) -> np.ndarray:
    """Express knots in percent; values all <= 1.5 are read as fractions."""
    arr = np.asarray(knots, dtype=float)
    if arr.size == 0:
        return arr
    scale = 100.0 if np.nanmax(arr) <= 1.5 else 1.0
    return np.round(arr * scale, 2)


def _entry_frame(entry: CurveEntry, lower: float, upper: float) -> pd.DataFrame:
    x = _normalize_knots(entry.lending_rates.knots)
    n = min(len(x), len(entry.borrow_rates.values), len(entry.lending_rates.values))
    df = pd.DataFrame(
        {
            "x": x[:n],
            "borrow": np.asarray(entry.borrow_rates.values[:n], dtype=float),
            "lend": np.asarray(entry.lending_rates.values[:n], dtype=float),
        }
    )
    finite = np.isfinite(df[["x", "borrow", "lend"]]).all(axis=1)
    in_range = (df["x"] >= lower) & (df["x"] <= upper)
    return df[finite & in_range]


def merge_series(
    curves: Mapping[str, CurveEntry],
    key_a: str,
    key_b: str,
    lower: float = 0.0,
    upper: float = 100.0,
) -> pd.DataFrame:
    """Join two selections of the curves map on utilization.

    Args:
        curves: Curves keyed ``"<protocol>_<token>"``.
        key_a: Key of the first selection.
        key_b: Key of the second selection.
        lower: Lowest utilization (percent) to keep.
        upper: Highest utilization (percent) to keep.

    Returns:
        DataFrame with columns x, a_borrow, a_lend, b_borrow, b_lend sorted by
        x. A selection missing from the map, or without a point at some x,
        leaves NaN in its columns.
    """
    frames = []
    for prefix, key in (("a", key_a), ("b", key_b)):
        entry = curves.get(key)
        if entry is None:
            continue
        frame = _entry_frame(entry, lower, upper).rename(
            columns={"borrow": f"{prefix}_borrow", "lend": f"{prefix}_lend"}
        )
        frames.append(frame.set_index("x"))

    if not frames:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    merged = pd.concat(frames, axis=1, join="outer").sort_index()
    merged.index.name = "x"
    return merged.reset_index().reindex(columns=SERIES_COLUMNS)
