"""Factory for creating the appropriate ReserveDataProvider."""

from __future__ import annotations

import logging
import os

from ratecurves.data.interfaces import ReserveDataProvider
from ratecurves.data.snapshot_provider import SnapshotDataProvider
from ratecurves.data.static_params import StaticDataProvider
from ratecurves.protocol.errors import MarketLoadError

logger = logging.getLogger(__name__)


def create_provider(
    use_snapshot: bool = False,
    snapshot_path: str | None = None,
    strict: bool = False,
) -> ReserveDataProvider:
    """Create a data provider, selecting static or snapshot data.

    Parameters
    ----------
    use_snapshot : bool
        If True, read reserves from a market snapshot file.
    snapshot_path : str | None
        Snapshot location.  Falls back to the ``KAMINO_SNAPSHOT_PATH``
        environment variable when not supplied.
    strict : bool
        Raise ``MarketLoadError`` instead of falling back to static data
        when the snapshot location is not configured.

    Returns
    -------
    ReserveDataProvider
        ``SnapshotDataProvider`` when requested and configured, otherwise
        ``StaticDataProvider``.
    """
    if not use_snapshot:
        return StaticDataProvider()

    resolved_path = snapshot_path or os.environ.get("KAMINO_SNAPSHOT_PATH")
    if not resolved_path:
        if strict:
            raise MarketLoadError("KAMINO_SNAPSHOT_PATH is not set")
        logger.warning("Snapshot data requested but no path provided; using static data")
        return StaticDataProvider()

    return SnapshotDataProvider(resolved_path)
