"""Search response.

The engine returns several entity kinds mixed in one relevance ranking.
Entities are kept per kind, keyed by their composed identity, while a side
list of ``(abbreviation, identity)`` pairs records the cross-kind order so
``get_results()`` can rebuild the original ranking.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from apisearch.exceptions import FormatError
from apisearch.model.base import require
from apisearch.model.entities import Brand, Category, Manufacturer, Product, Tag
from apisearch.result.aggregation import ResultAggregation
from apisearch.result.aggregations import Aggregations

logger = logging.getLogger("apisearch.result")

# Wire key of each per-kind collection, by order-record abbreviation
ABBREVIATIONS: Dict[str, str] = {
    "p": "products",
    "c": "categories",
    "m": "manufacturers",
    "b": "brands",
    "t": "tags",
}

_FACTORIES: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
    "products": Product.create_from_array,
    "categories": Category.create_from_array,
    "manufacturers": Manufacturer.create_from_array,
    "brands": Brand.create_from_array,
    "tags": Tag.create_from_array,
}


class Result:
    def __init__(
        self,
        total_elements: int,
        total_products: int,
        total_hits: int,
        min_price: int,
        max_price: int,
    ) -> None:
        self.total_elements = total_elements
        self.total_products = total_products
        self.total_hits = total_hits
        self.min_price = min_price
        self.max_price = max_price

        self.products: Dict[str, Product] = {}
        self.categories: Dict[str, Category] = {}
        self.manufacturers: Dict[str, Manufacturer] = {}
        self.brands: Dict[str, Brand] = {}
        self.tags: Dict[str, Tag] = {}
        self.results: List[Tuple[str, str]] = []
        self.aggregations = Aggregations()

    def _container(self, abbreviation: str) -> Dict[str, Any]:
        return getattr(self, ABBREVIATIONS[abbreviation])

    def _add(self, abbreviation: str, entity: Any) -> None:
        uuid = entity.reference.compose_uuid()
        container = self._container(abbreviation)
        if uuid in container:
            # Keep the first relevance position, refresh the entity
            logger.debug("Entity '%s' added twice, keeping its first position", uuid)
        else:
            self.results.append((abbreviation, uuid))
        container[uuid] = entity

    def add_product(self, product: Product) -> None:
        self._add("p", product)

    def add_category(self, category: Category) -> None:
        self._add("c", category)

    def add_manufacturer(self, manufacturer: Manufacturer) -> None:
        self._add("m", manufacturer)

    def add_brand(self, brand: Brand) -> None:
        self._add("b", brand)

    def add_tag(self, tag: Tag) -> None:
        self._add("t", tag)

    def get_products(self) -> List[Product]:
        return list(self.products.values())

    def get_categories(self) -> List[Category]:
        return list(self.categories.values())

    def get_manufacturers(self) -> List[Manufacturer]:
        return list(self.manufacturers.values())

    def get_brands(self) -> List[Brand]:
        return list(self.brands.values())

    def get_tags(self) -> List[Tag]:
        return list(self.tags.values())

    def get_results(self) -> List[Any]:
        """All entities, of every kind, in relevance order."""
        return [self._container(kind)[uuid] for kind, uuid in self.results]

    def get_first_result(self) -> Optional[Any]:
        if not self.results:
            return None
        kind, uuid = self.results[0]
        return self._container(kind)[uuid]

    def set_aggregations(self, aggregations: Aggregations) -> None:
        self.aggregations = aggregations

    def get_aggregations(self) -> Aggregations:
        return self.aggregations

    def get_aggregation(self, name: str) -> Optional[ResultAggregation]:
        return self.aggregations.get_aggregation(name)

    def has_not_empty_aggregation(self, name: str) -> bool:
        return self.aggregations.has_not_empty_aggregation(name)

    def get_total_elements(self) -> int:
        return self.total_elements

    def get_total_products(self) -> int:
        return self.total_products

    def get_total_hits(self) -> int:
        return self.total_hits

    def get_min_price(self) -> int:
        return self.min_price

    def get_max_price(self) -> int:
        return self.max_price

    def to_array(self) -> Dict[str, Any]:
        return {
            "total_elements": self.total_elements,
            "total_products": self.total_products,
            "total_hits": self.total_hits,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "products": {uuid: p.to_array() for uuid, p in self.products.items()},
            "categories": {uuid: c.to_array() for uuid, c in self.categories.items()},
            "manufacturers": {uuid: m.to_array() for uuid, m in self.manufacturers.items()},
            "brands": {uuid: b.to_array() for uuid, b in self.brands.items()},
            "tags": {uuid: t.to_array() for uuid, t in self.tags.items()},
            "results": [[kind, uuid] for kind, uuid in self.results],
            "aggregations": self.aggregations.to_array(),
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Result:
        try:
            result = cls(
                int(require(array, "total_elements", "Result")),
                int(require(array, "total_products", "Result")),
                int(require(array, "total_hits", "Result")),
                int(require(array, "min_price", "Result")),
                int(require(array, "max_price", "Result")),
            )
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Result totals must be integers: {exc}") from exc

        for key, factory in _FACTORIES.items():
            raw = array.get(key) or {}
            if not isinstance(raw, Mapping):
                raise FormatError(f"Result '{key}' must be keyed by composed identity")
            container = getattr(result, key)
            for uuid, entity in raw.items():
                container[uuid] = factory(entity)

        for pair in array.get("results") or []:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise FormatError(f"Result order entries must be [kind, identity] pairs: {pair!r}")
            kind, uuid = str(pair[0]), str(pair[1])
            if kind not in ABBREVIATIONS:
                raise FormatError(f"Unknown result kind abbreviation: '{kind}'")
            if uuid not in result._container(kind):
                raise FormatError(f"Result order references missing {ABBREVIATIONS[kind]} '{uuid}'")
            result.results.append((kind, uuid))

        raw_aggregations = array.get("aggregations")
        if raw_aggregations:
            result.aggregations = Aggregations.create_from_array(raw_aggregations)
        return result
