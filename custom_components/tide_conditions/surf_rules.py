"""Per-spot surf quality rules.

Every spot maps to one rule variant. A variant is a prioritized decision
table over (tide height, tide direction) evaluated top to bottom; the first
matching row wins and the last row always matches, so every input gets a
quality. Variants live in an immutable registry keyed by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Callable, Mapping, Tuple

from .const import (
    RULE_CAPITOLA,
    RULE_PLEASURE_POINT,
    RULE_STANDARD,
    RULE_STEAMER_LANE,
    RULE_TWENTY_SIXTH_AVE,
)
from .data_schema import SurfCondition, SurfQuality, SurfSpotConfig, TideDirection

_LOGGER = logging.getLogger(__name__)

SHALLOW_REEF_FLOOR = 0.0
STEAMER_KELP_FLOOR = 1.0

RuleResult = Tuple[SurfQuality, str]
Rule = Callable[[float, bool, SurfSpotConfig], RuleResult]


@dataclass(frozen=True)
class StandardTexts:
    """Reason strings of the standard table, one per row."""

    excellent: str
    good: str
    too_shallow: str
    very_low: str
    closes_out: str
    higher: str


STANDARD_TEXTS = StandardTexts(
    excellent="Ideal tide for this spot",
    good="Good tide (better on the preferred direction)",
    too_shallow="Too shallow, exposed rocks",
    very_low="Very low, getting shallow",
    closes_out="Too high, closes out",
    higher="Higher tide, not ideal",
)

PLEASURE_POINT_TEXTS = StandardTexts(
    excellent="Perfect low-mid rising tide!",
    good="Good low-mid tide (better on rising)",
    too_shallow="Too shallow, exposed rocks",
    very_low="Very low, getting shallow",
    closes_out="Too high, closes out",
    higher="Higher tide, not ideal",
)

TWENTY_SIXTH_AVE_TEXTS = StandardTexts(
    excellent="Firing on low-mid rising!",
    good="Good low-mid (better on rising)",
    too_shallow="Way too shallow, rocky",
    very_low="Very low, watch the rocks",
    closes_out="Too high, closes out",
    higher="Outside optimal range",
)


def _in_range(height: float, spot: SurfSpotConfig) -> bool:
    lower, upper = spot.optimal_range
    return lower <= height <= upper


def _direction_matches(is_rising: bool, preferred: TideDirection) -> bool:
    if preferred == TideDirection.ANY:
        return True
    return is_rising == (preferred == TideDirection.RISING)


def _standard_table(texts: StandardTexts) -> Rule:
    def rule(height: float, is_rising: bool, spot: SurfSpotConfig) -> RuleResult:
        if _in_range(height, spot):
            if _direction_matches(is_rising, spot.preferred_direction):
                return SurfQuality.EXCELLENT, texts.excellent
            return SurfQuality.GOOD, texts.good
        if height < spot.optimal_range[0]:
            if height < SHALLOW_REEF_FLOOR:
                return SurfQuality.POOR, texts.too_shallow
            return SurfQuality.FAIR, texts.very_low
        if height > spot.closeout_height:
            return SurfQuality.POOR, texts.closes_out
        return SurfQuality.FAIR, texts.higher

    return rule


def _steamer_lane(height: float, is_rising: bool, spot: SurfSpotConfig) -> RuleResult:
    if _in_range(height, spot):
        if is_rising:
            return SurfQuality.EXCELLENT, "Classic Steamer Lane conditions!"
        return SurfQuality.GOOD, "Good waves at the Lane"
    if height < STEAMER_KELP_FLOOR:
        return SurfQuality.POOR, "Too low, kelp and rocks"
    if height > spot.closeout_height:
        return SurfQuality.FAIR, "High tide mushburgers"
    return SurfQuality.FAIR, "Workable but not ideal"


def _capitola(height: float, is_rising: bool, spot: SurfSpotConfig) -> RuleResult:
    if _in_range(height, spot):
        if not is_rising:
            return SurfQuality.GOOD, "Fun waves at Capitola"
        return SurfQuality.FAIR, "Decent conditions"
    if height < spot.optimal_range[0]:
        return SurfQuality.POOR, "Too shallow"
    return SurfQuality.POOR, "Closed out"


RULES: Mapping[str, Rule] = MappingProxyType(
    {
        RULE_STANDARD: _standard_table(STANDARD_TEXTS),
        RULE_PLEASURE_POINT: _standard_table(PLEASURE_POINT_TEXTS),
        RULE_TWENTY_SIXTH_AVE: _standard_table(TWENTY_SIXTH_AVE_TEXTS),
        RULE_STEAMER_LANE: _steamer_lane,
        RULE_CAPITOLA: _capitola,
    }
)


def evaluate_spot(
    height: float,
    is_rising: bool,
    spot: SurfSpotConfig,
    evaluated_at: datetime,
) -> SurfCondition:
    """Rate the surf at `spot` for the given tide height and direction."""
    rule = RULES.get(spot.rule_variant)
    if rule is None:
        _LOGGER.debug(
            "Unknown rule variant %s for spot %s, using standard rules",
            spot.rule_variant,
            spot.spot_id,
        )
        rule = RULES[RULE_STANDARD]

    quality, reason = rule(height, is_rising, spot)
    return SurfCondition(
        spot_id=spot.spot_id,
        spot_name=spot.display_name or spot.name,
        quality=quality,
        tide_height=height,
        reason=reason,
        evaluated_at=evaluated_at,
    )
