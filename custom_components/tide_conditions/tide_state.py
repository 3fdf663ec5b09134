"""Current tide state classification and upcoming high/low selection."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence, Tuple

from .const import TIDE_HIGH_THRESHOLD, TIDE_LOW_THRESHOLD, UPCOMING_EVENT_LIMIT
from .data_schema import CurrentTideState, TidalSample, TideEvent, TideKind, TideType
from .exceptions import InsufficientDataError

_LOGGER = logging.getLogger(__name__)


def tide_type_for(
    height: float,
    is_rising: bool,
    high_threshold: float = TIDE_HIGH_THRESHOLD,
    low_threshold: float = TIDE_LOW_THRESHOLD,
) -> TideType:
    """Height bands win over direction; in between, direction decides."""
    if height > high_threshold:
        return TideType.HIGH
    if height < low_threshold:
        return TideType.LOW
    return TideType.RISING if is_rising else TideType.FALLING


def classify(
    series: Sequence[TidalSample],
    now: datetime,
    high_threshold: float = TIDE_HIGH_THRESHOLD,
    low_threshold: float = TIDE_LOW_THRESHOLD,
) -> CurrentTideState:
    """Classify the tide at `now` from the sample nearest in time.

    Direction compares the reference sample with the one before it; the first
    sample of a series counts as rising. Ties on distance go to the earlier
    sample.
    """
    if not series:
        raise InsufficientDataError("No tide samples to classify")

    ref_idx = 0
    best = abs((series[0].timestamp - now).total_seconds())
    for idx in range(1, len(series)):
        distance = abs((series[idx].timestamp - now).total_seconds())
        if distance < best:
            best = distance
            ref_idx = idx

    reference = series[ref_idx]
    if ref_idx == 0:
        is_rising = True
    else:
        is_rising = reference.height > series[ref_idx - 1].height

    state = CurrentTideState(
        height=reference.height,
        timestamp=reference.timestamp,
        is_rising=is_rising,
        tide_type=tide_type_for(reference.height, is_rising, high_threshold, low_threshold),
    )
    _LOGGER.debug(
        "Tide at %s: %.2f ft (%s, reference %s)",
        now,
        state.height,
        state.tide_type.value,
        reference.timestamp,
    )
    return state


def upcoming_events(
    samples: Iterable[TidalSample],
    now: datetime,
    limit: int = UPCOMING_EVENT_LIMIT,
) -> Tuple[TideEvent, ...]:
    """Future highs and lows in ascending order, at most `limit` of them."""
    future = sorted(
        (
            s
            for s in samples
            if s.kind in (TideKind.HIGH, TideKind.LOW) and s.timestamp > now
        ),
        key=lambda s: s.timestamp,
    )
    return tuple(
        TideEvent(
            timestamp=s.timestamp,
            height=s.height,
            kind=s.kind,
            is_rising=s.kind == TideKind.LOW,
        )
        for s in future[: max(limit, 0)]
    )
