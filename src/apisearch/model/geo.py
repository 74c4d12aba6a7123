"""Location ranges used by geo filters.

A range is either a circle (center plus distance, e.g. ``"10km"``) or a
rectangle given by its top-left and bottom-right corners.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from apisearch.exceptions import FormatError
from apisearch.model.base import require
from apisearch.model.coordinate import Coordinate


class LocationRange(ABC):
    """Abstract geographic area."""

    type: str = ""

    @abstractmethod
    def data(self) -> Dict[str, Any]:
        """Return the type-specific payload."""

    def to_array(self) -> Dict[str, Any]:
        return {"type": self.type, "data": self.data()}

    @staticmethod
    def create_from_array(array: Mapping[str, Any]) -> LocationRange:
        range_type = require(array, "type", "LocationRange")
        data = require(array, "data", "LocationRange")
        if range_type == CoordinateAndDistance.type:
            return CoordinateAndDistance(
                coordinate=Coordinate.create_from_array(require(data, "coordinate", range_type)),
                distance=str(require(data, "distance", range_type)),
            )
        if range_type == Square.type:
            return Square(
                top_left=Coordinate.create_from_array(require(data, "top_left", range_type)),
                bottom_right=Coordinate.create_from_array(require(data, "bottom_right", range_type)),
            )
        raise FormatError(f"Unknown location range type: '{range_type}'")


@dataclass(frozen=True)
class CoordinateAndDistance(LocationRange):
    coordinate: Coordinate
    distance: str

    type = "CoordinateAndDistance"

    def data(self) -> Dict[str, Any]:
        return {"coordinate": self.coordinate.to_array(), "distance": self.distance}


@dataclass(frozen=True)
class Square(LocationRange):
    top_left: Coordinate
    bottom_right: Coordinate

    type = "Square"

    def data(self) -> Dict[str, Any]:
        return {
            "top_left": self.top_left.to_array(),
            "bottom_right": self.bottom_right.to_array(),
        }
