"""Tide series helpers: merge samples from several fetches into one series."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

from .data_schema import TidalSample, TideKind

_LOGGER = logging.getLogger(__name__)


def _instant(sample: TidalSample) -> datetime:
    # aware datetimes sharing a tzinfo compare by wall clock, which repeats
    # for an hour when daylight saving ends
    return sample.timestamp.astimezone(timezone.utc)


def merge_series(*collections: Iterable[TidalSample]) -> Tuple[TidalSample, ...]:
    """Combine sample collections into one strictly increasing series.

    Collections are taken in the order given; when two samples fall on the
    same instant the one seen first wins. Gaps are left as they are.
    """
    combined: List[TidalSample] = []
    for collection in collections:
        if collection:
            combined.extend(collection)

    # sorted() is stable, so first-seen order survives among equal instants
    combined = sorted(combined, key=_instant)

    merged: List[TidalSample] = []
    last_instant = None
    for sample in combined:
        instant = _instant(sample)
        if instant == last_instant:
            continue
        merged.append(sample)
        last_instant = instant

    dropped = len(combined) - len(merged)
    if dropped:
        _LOGGER.debug("Dropped %d duplicate tide samples while merging", dropped)
    return tuple(merged)


def high_low_only(samples: Iterable[TidalSample]) -> Tuple[TidalSample, ...]:
    """Keep only samples marked as a high or a low."""
    return tuple(s for s in samples if s.kind in (TideKind.HIGH, TideKind.LOW))
