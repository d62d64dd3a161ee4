"""Data models for route-matrix requests."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, validator

DEFAULT_MODE = "DRIVE"
DEFAULT_UNITS = "METRIC"
DEFAULT_LANGUAGE = "fr"


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


class RouteMatrixRequest(BaseModel):
    """Inbound payload for the route-matrix endpoint.

    ``origins`` is a single ``"lat,lng"`` pair, ``destinations`` is one or more
    pairs joined by ``|``. Presence of both is checked by the proxy, not here,
    so that a missing field maps to the proxy's own error message.
    """

    origins: Optional[str] = None
    destinations: Optional[str] = None
    mode: str = DEFAULT_MODE
    units: str = DEFAULT_UNITS
    language: str = DEFAULT_LANGUAGE

    @validator("mode", pre=True)
    def default_mode(cls, value: Any) -> Any:
        return DEFAULT_MODE if value is None else value

    @validator("units", pre=True)
    def default_units(cls, value: Any) -> Any:
        return DEFAULT_UNITS if value is None else value

    @validator("language", pre=True)
    def default_language(cls, value: Any) -> Any:
        return DEFAULT_LANGUAGE if value is None else value

    def fingerprint(self) -> str:
        """Cache key covering every parameter that affects the upstream response."""
        return f"{self.origins}|{self.destinations}|{self.mode}|{self.units}|{self.language}"
