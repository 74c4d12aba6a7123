"""Predefined sort specifications.

Each constant is a mapping ``{field: {"order": ...}}``. ``_geo_distance``
sorts need the query coordinate, which ``Query.sort_by`` injects.
"""

from __future__ import annotations

from typing import Any, Dict

ASC = "asc"
DESC = "desc"

GEO_DISTANCE = "_geo_distance"


class SortBy:
    SCORE: Dict[str, Any] = {"_score": {"order": ASC}}
    ID_ASC: Dict[str, Any] = {"uuid.id": {"order": ASC}}
    ID_DESC: Dict[str, Any] = {"uuid.id": {"order": DESC}}
    PRICE_ASC: Dict[str, Any] = {"real_price": {"order": ASC}}
    PRICE_DESC: Dict[str, Any] = {"real_price": {"order": DESC}}
    DISCOUNT_ASC: Dict[str, Any] = {"discount": {"order": ASC}}
    DISCOUNT_DESC: Dict[str, Any] = {"discount": {"order": DESC}}
    DISCOUNT_PERCENTAGE_ASC: Dict[str, Any] = {"discount_percentage": {"order": ASC}}
    DISCOUNT_PERCENTAGE_DESC: Dict[str, Any] = {"discount_percentage": {"order": DESC}}
    UPDATED_AT_ASC: Dict[str, Any] = {"updated_at": {"order": ASC}}
    UPDATED_AT_DESC: Dict[str, Any] = {"updated_at": {"order": DESC}}
    RATING_ASC: Dict[str, Any] = {"rating": {"order": ASC}}
    RATING_DESC: Dict[str, Any] = {"rating": {"order": DESC}}
    LOCATION_KM_ASC: Dict[str, Any] = {GEO_DISTANCE: {"order": ASC, "unit": "km"}}
    LOCATION_KM_DESC: Dict[str, Any] = {GEO_DISTANCE: {"order": DESC, "unit": "km"}}
    LOCATION_MI_ASC: Dict[str, Any] = {GEO_DISTANCE: {"order": ASC, "unit": "mi"}}
    LOCATION_MI_DESC: Dict[str, Any] = {GEO_DISTANCE: {"order": DESC, "unit": "mi"}}

    @staticmethod
    def by_field(field: str, order: str = ASC) -> Dict[str, Any]:
        """Sort by an arbitrary indexed field."""
        if order not in (ASC, DESC):
            raise ValueError(f"Sort order must be '{ASC}' or '{DESC}', got '{order}'")
        return {field: {"order": order}}

    @staticmethod
    def is_geo_distance(sort: Dict[str, Any]) -> bool:
        return GEO_DISTANCE in sort
