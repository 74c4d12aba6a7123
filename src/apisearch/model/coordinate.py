from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from apisearch.exceptions import FormatError
from apisearch.model.base import require


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A geographic point in decimal degrees."""

    lat: float
    lon: float

    def to_array(self) -> Dict[str, Any]:
        return {"lat": float(self.lat), "lon": float(self.lon)}

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Coordinate:
        try:
            return cls(
                lat=float(require(array, "lat", "Coordinate")),
                lon=float(require(array, "lon", "Coordinate")),
            )
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Coordinate values must be numeric: {exc}") from exc
