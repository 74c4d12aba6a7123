"""Computed aggregation returned by the service.

Holds one counter per bucket and knows which buckets are currently being
filtered on (the active elements), so a UI can render facets with their
selected state.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from apisearch.model.base import require
from apisearch.query.filter import ApplicationType, decode_enum
from apisearch.result.counter import Counter


class ResultAggregation:
    def __init__(
        self,
        name: str,
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        total_elements: int = 0,
        active_elements: Optional[Iterable[str]] = None,
    ) -> None:
        self.name = name
        self.application_type = ApplicationType(application_type)
        self.total_elements = int(total_elements)
        self.active_elements: List[str] = list(active_elements or [])
        self.counters: Dict[str, Counter] = {}
        self.highest_active_level = 0

    def add_counter(self, name: str, n: int) -> Counter:
        counter = Counter.create_by_active_elements(name, n, self.active_elements)
        self._store(counter)
        return counter

    def _store(self, counter: Counter) -> None:
        self.counters[counter.id] = counter
        if counter.used and self.has_levels():
            self.highest_active_level = max(self.highest_active_level, counter.level)

    def get_counters(self) -> Dict[str, Counter]:
        return dict(self.counters)

    def get_counter(self, id: str) -> Optional[Counter]:
        return self.counters.get(id)

    def get_active_elements(self) -> List[str]:
        return list(self.active_elements)

    def get_active_counters(self) -> List[Counter]:
        return [c for c in self.counters.values() if c.used]

    def get_all_elements(self) -> List[Counter]:
        """Active counters first, then the selectable ones.

        With hierarchical levels only the level right below the deepest active
        one is selectable, so the caller can drill down one step at a time.
        """
        active = self.get_active_counters()
        inactive = [c for c in self.counters.values() if not c.used]
        if self.has_levels():
            active.sort(key=lambda c: c.level)
            if active:
                inactive = [c for c in inactive if c.level == self.highest_active_level + 1]
        return active + inactive

    def is_filter(self) -> bool:
        return bool(self.active_elements)

    def has_levels(self) -> bool:
        return self.application_type == ApplicationType.MUST_ALL_WITH_LEVELS

    def is_empty(self) -> bool:
        return not self.counters

    def get_total_elements(self) -> int:
        return self.total_elements

    def get_highest_active_level(self) -> int:
        return self.highest_active_level

    def to_array(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "counters": [c.to_array() for c in self.counters.values()],
            "application_type": int(self.application_type),
            "active_elements": list(self.active_elements),
            "total_elements": self.total_elements,
            "highest_active_level": self.highest_active_level,
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> ResultAggregation:
        aggregation = cls(
            name=str(require(array, "name", "Aggregation")),
            application_type=decode_enum(
                ApplicationType,
                array.get("application_type", ApplicationType.AT_LEAST_ONE),
                "Aggregation",
            ),
            total_elements=int(array.get("total_elements", 0)),
            active_elements=array.get("active_elements") or [],
        )
        for raw in array.get("counters") or []:
            aggregation._store(Counter.create_from_array(raw))
        aggregation.highest_active_level = int(
            array.get("highest_active_level", aggregation.highest_active_level)
        )
        return aggregation
