from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from apisearch.result.aggregation import ResultAggregation


class Aggregations:
    """Named aggregation results of one response."""

    def __init__(self, total_elements: int = 0) -> None:
        self.total_elements = int(total_elements)
        self.aggregations: Dict[str, ResultAggregation] = {}

    def add_aggregation(self, name: str, aggregation: ResultAggregation) -> None:
        self.aggregations[name] = aggregation

    def get_aggregations(self) -> Dict[str, ResultAggregation]:
        return dict(self.aggregations)

    def get_aggregation(self, name: str) -> Optional[ResultAggregation]:
        return self.aggregations.get(name)

    def has_not_empty_aggregation(self, name: str) -> bool:
        aggregation = self.aggregations.get(name)
        return aggregation is not None and not aggregation.is_empty()

    def get_total_elements(self) -> int:
        return self.total_elements

    def to_array(self) -> Dict[str, Any]:
        return {
            "aggregations": {name: a.to_array() for name, a in self.aggregations.items()},
            "total_elements": self.total_elements,
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Aggregations:
        aggregations = cls(total_elements=int(array.get("total_elements", 0)))
        for name, raw in (array.get("aggregations") or {}).items():
            aggregations.add_aggregation(name, ResultAggregation.create_from_array(raw))
        return aggregations
