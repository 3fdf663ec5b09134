"""Short-lived in-memory cache of the latest published snapshot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from homeassistant.util import dt as dt_util

from .data_schema import ConditionsSnapshot

_LOGGER = logging.getLogger(__name__)

# Default freshness window (seconds)
DEFAULT_MAX_AGE = 300


class SnapshotStore:
    """Holds the most recent snapshot and when it was published."""

    def __init__(self) -> None:
        self._latest: Optional[ConditionsSnapshot] = None
        self._published_at: Optional[datetime] = None

    @property
    def latest(self) -> Optional[ConditionsSnapshot]:
        return self._latest

    @property
    def published_at(self) -> Optional[datetime]:
        return self._published_at

    def publish(self, snapshot: ConditionsSnapshot, now: Optional[datetime] = None) -> None:
        """Replace the cached snapshot."""
        self._latest = snapshot
        self._published_at = now or dt_util.utcnow()
        _LOGGER.debug(
            "Published snapshot source=%s placeholder=%s stale=%s",
            snapshot.tide_source,
            snapshot.is_placeholder,
            snapshot.is_stale,
        )

    def is_fresh(self, max_age_seconds: float = DEFAULT_MAX_AGE, now: Optional[datetime] = None) -> bool:
        """True when a snapshot was published less than `max_age_seconds` ago."""
        if self._latest is None or self._published_at is None:
            return False
        now = now or dt_util.utcnow()
        age = (now - self._published_at).total_seconds()
        return 0 <= age < max_age_seconds
