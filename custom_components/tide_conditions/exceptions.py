"""Errors raised by the tide conditions engine."""

from __future__ import annotations

from typing import Optional

from homeassistant.exceptions import HomeAssistantError


class TideConditionsError(HomeAssistantError):
    """Base class for tide conditions failures."""


class NetworkError(TideConditionsError):
    """Upstream unreachable, timed out or answered with a non-success status."""

    def __init__(self, source: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.status = status


class ParseError(TideConditionsError):
    """Upstream body does not match the expected schema."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class InsufficientDataError(TideConditionsError):
    """Not a single usable tide sample to work from."""


class EvaluationError(TideConditionsError):
    """A current tide height could not be established for this cycle."""
