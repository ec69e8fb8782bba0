"""Environment-driven settings for the curves API and dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT_ENV = Path(__file__).resolve().parents[1] / ".env"


def load_env_file(path: Path = _ROOT_ENV) -> None:
    """Load ``KEY=VALUE`` lines into ``os.environ`` without overriding it."""
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        data_source: ``"static"`` or ``"snapshot"``.
        snapshot_path: Market snapshot file, required for ``"snapshot"``.
        tokens: Optional symbol filter; empty means every reserve.
        max_workers: Thread count for per-token evaluation.
        log_level: Logging level name for entry points.
    """

    data_source: str = "static"
    snapshot_path: str | None = None
    tokens: tuple[str, ...] = field(default_factory=tuple)
    max_workers: int = 1
    log_level: str = "INFO"

    @property
    def use_snapshot(self) -> bool:
        return self.data_source == "snapshot"

    @classmethod
    def from_env(cls) -> "Settings":
        source = os.environ.get("CURVES_DATA_SOURCE", "static").strip().lower()
        if source not in ("static", "snapshot"):
            raise ValueError(f"CURVES_DATA_SOURCE must be 'static' or 'snapshot', got {source!r}")

        raw_tokens = os.environ.get("CURVES_TOKENS", "")
        tokens = tuple(t.strip() for t in raw_tokens.split(",") if t.strip())

        return cls(
            data_source=source,
            snapshot_path=os.environ.get("KAMINO_SNAPSHOT_PATH") or None,
            tokens=tokens,
            max_workers=int(os.environ.get("CURVES_MAX_WORKERS", "1")),
            log_level=os.environ.get("CURVES_LOG_LEVEL", "INFO").upper(),
        )
