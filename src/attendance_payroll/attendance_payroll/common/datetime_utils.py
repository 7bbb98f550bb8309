from __future__ import annotations

from datetime import datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def file_timestamp(moment: datetime) -> str:
    """Timestamp safe for file names: 2025-03-01_14-05-09."""
    return moment.strftime("%Y-%m-%d_%H-%M-%S")
