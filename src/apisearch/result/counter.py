from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping

from apisearch.exceptions import FormatError
from apisearch.model.base import require

PART_SEPARATOR = "~~"
VALUE_SEPARATOR = "##"


def parse_bucket_name(name: str) -> Dict[str, str]:
    """Decode an engine bucket name into its named parts.

    ``"id##1~~name##Nike"`` becomes ``{"id": "1", "name": "Nike"}``; a plain
    name such as ``"red"`` becomes ``{"id": "red", "name": "red"}``.
    """
    values: Dict[str, str] = {}
    for part in name.split(PART_SEPARATOR):
        key, sep, value = part.partition(VALUE_SEPARATOR)
        if sep:
            values[key] = value
    if "id" not in values:
        return {"id": name, "name": name}
    values.setdefault("name", values["id"])
    return values


@dataclass(slots=True)
class Counter:
    """Number of matches falling into one aggregation bucket."""

    values: Dict[str, str] = field(default_factory=dict)
    used: bool = False
    n: int = 0

    @classmethod
    def create_by_active_elements(cls, name: str, n: int, active_elements: Iterable[str]) -> Counter:
        values = parse_bucket_name(name)
        return cls(values=values, used=values["id"] in set(active_elements), n=int(n))

    @property
    def id(self) -> str:
        return self.values["id"]

    @property
    def name(self) -> str:
        return self.values.get("name", self.id)

    @property
    def level(self) -> int:
        return int(self.values.get("level", 0))

    def to_array(self) -> Dict[str, Any]:
        return {"values": dict(self.values), "used": self.used, "n": self.n}

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Counter:
        values = require(array, "values", "Counter")
        if not isinstance(values, Mapping) or "id" not in values:
            raise FormatError("Counter values must be a mapping with an 'id'")
        try:
            n = int(array.get("n", 0))
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Counter n must be an integer: {exc}") from exc
        return cls(
            values={str(k): str(v) for k, v in values.items()},
            used=bool(array.get("used", False)),
            n=n,
        )
