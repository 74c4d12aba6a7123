from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from apisearch.exceptions import FormatError
from apisearch.model.base import require
from apisearch.query.filter import ApplicationType, FilterType, decode_enum

# Separates the physical fields of a composite aggregation field
FIELD_SEPARATOR = "|"


@dataclass(frozen=True, slots=True)
class Aggregation:
    """A request for bucketed counts along one dimension.

    ``field`` may join several physical fields, e.g. ``"brand.id|brand.name"``,
    so each bucket carries every part. ``options`` lists explicit buckets
    (tag names or ``"from..to"`` ranges).
    """

    name: str
    field: str
    application_type: ApplicationType
    aggregation_type: FilterType
    options: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        name: str,
        field: str,
        application_type: ApplicationType,
        aggregation_type: FilterType,
        options: Optional[Iterable[str]] = None,
    ) -> Aggregation:
        return cls(
            name=name,
            field=field,
            application_type=ApplicationType(application_type),
            aggregation_type=FilterType(aggregation_type),
            options=tuple(options or ()),
        )

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self.field.split(FIELD_SEPARATOR))

    def to_array(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "field": self.field,
            "application_type": int(self.application_type),
            "aggregation_type": self.aggregation_type.value,
            "options": list(self.options),
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Aggregation:
        options = array.get("options") or []
        if not isinstance(options, (list, tuple)):
            raise FormatError("Aggregation options must be a list")
        return cls(
            name=str(require(array, "name", "Aggregation")),
            field=str(require(array, "field", "Aggregation")),
            application_type=decode_enum(
                ApplicationType, require(array, "application_type", "Aggregation"), "Aggregation"
            ),
            aggregation_type=decode_enum(
                FilterType, require(array, "aggregation_type", "Aggregation"), "Aggregation"
            ),
            options=tuple(options),
        )
