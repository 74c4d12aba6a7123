"""Filter declarations.

A filter constrains one field to a set of values. How those values combine is
its application type; what kind of field it targets is its filter type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar

from apisearch.exceptions import FormatError
from apisearch.model.base import require

E = TypeVar("E", bound=Enum)


class ApplicationType(IntEnum):
    """How multiple filter values combine."""

    MUST_ALL = 4
    MUST_ALL_WITH_LEVELS = 5
    AT_LEAST_ONE = 8
    EXCLUDE = 16


class FilterType(str, Enum):
    """Shape of the targeted field. Shared by filters and aggregations."""

    FIELD = "field"
    QUERY = "query"
    NESTED = "nested"
    RANGE = "range"
    GEO = "geo"


def decode_enum(enum_cls: Type[E], value: Any, owner: str) -> E:
    """Map a wire value onto a closed enum, raising FormatError if unknown."""
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise FormatError(f"{owner} has unknown {enum_cls.__name__} value: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Filter:
    field: str
    values: Tuple[Any, ...]
    application_type: ApplicationType
    filter_type: FilterType
    filter_options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        field: str,
        values: Iterable[Any],
        application_type: ApplicationType,
        filter_type: FilterType,
        filter_options: Optional[Mapping[str, Any]] = None,
    ) -> Filter:
        return cls(
            field=field,
            values=tuple(values),
            application_type=ApplicationType(application_type),
            filter_type=FilterType(filter_type),
            filter_options=dict(filter_options or {}),
        )

    def to_array(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "values": list(self.values),
            "application_type": int(self.application_type),
            "filter_type": self.filter_type.value,
            "filter_options": dict(self.filter_options),
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Filter:
        values = require(array, "values", "Filter")
        if not isinstance(values, (list, tuple)):
            raise FormatError("Filter values must be a list")
        return cls(
            field=str(array.get("field", "")),
            values=tuple(values),
            application_type=decode_enum(
                ApplicationType, require(array, "application_type", "Filter"), "Filter"
            ),
            filter_type=decode_enum(FilterType, require(array, "filter_type", "Filter"), "Filter"),
            filter_options=dict(array.get("filter_options") or {}),
        )
