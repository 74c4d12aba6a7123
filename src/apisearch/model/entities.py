"""Entity collaborators returned by the search service.

Only what the query and result layers rely on is modeled here: the composite
identity of each entity and its wire map. Every entity exposes ``reference``
(an ``ItemUUID``), ``to_array()`` and ``create_from_array()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from apisearch.exceptions import FormatError
from apisearch.model.base import require
from apisearch.model.coordinate import Coordinate
from apisearch.model.item_uuid import ItemUUID


def _compact(array: Dict[str, Any]) -> Dict[str, Any]:
    # Absent optional values are not sent over the wire
    return {k: v for k, v in array.items() if v is not None and v != [] and v != {}}


@dataclass(slots=True)
class Category:
    id: str
    name: str
    level: int = 1
    slug: Optional[str] = None

    @property
    def reference(self) -> ItemUUID:
        return ItemUUID(id=self.id, type="category")

    def to_array(self) -> Dict[str, Any]:
        return _compact({"id": self.id, "name": self.name, "level": self.level, "slug": self.slug})

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Category:
        try:
            level = int(array.get("level", 1))
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Category level must be an integer: {exc}") from exc
        return cls(
            id=str(require(array, "id", "Category")),
            name=str(require(array, "name", "Category")),
            level=level,
            slug=array.get("slug"),
        )


@dataclass(slots=True)
class Manufacturer:
    id: str
    name: str
    slug: Optional[str] = None

    @property
    def reference(self) -> ItemUUID:
        return ItemUUID(id=self.id, type="manufacturer")

    def to_array(self) -> Dict[str, Any]:
        return _compact({"id": self.id, "name": self.name, "slug": self.slug})

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Manufacturer:
        return cls(
            id=str(require(array, "id", "Manufacturer")),
            name=str(require(array, "name", "Manufacturer")),
            slug=array.get("slug"),
        )


@dataclass(slots=True)
class Brand:
    id: str
    name: str
    slug: Optional[str] = None

    @property
    def reference(self) -> ItemUUID:
        return ItemUUID(id=self.id, type="brand")

    def to_array(self) -> Dict[str, Any]:
        return _compact({"id": self.id, "name": self.name, "slug": self.slug})

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Brand:
        return cls(
            id=str(require(array, "id", "Brand")),
            name=str(require(array, "name", "Brand")),
            slug=array.get("slug"),
        )


@dataclass(slots=True)
class Tag:
    """A free-form label. Its name doubles as its id."""

    name: str

    @property
    def reference(self) -> ItemUUID:
        return ItemUUID(id=self.name, type="tag")

    def to_array(self) -> Dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Tag:
        return cls(name=str(require(array, "name", "Tag")))


@dataclass(slots=True)
class Product:
    """A sellable item.

    The product family scopes its identity, so ``("1", "book")`` and
    ``("1", "dvd")`` are different products.
    """

    id: str
    name: str
    family: str = "product"
    description: str = ""
    price: float = 0.0
    reduced_price: Optional[float] = None
    rating: Optional[float] = None
    stock: Optional[int] = None
    brand: Optional[Brand] = None
    manufacturers: List[Manufacturer] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    stores: List[str] = field(default_factory=list)
    coordinate: Optional[Coordinate] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def reference(self) -> ItemUUID:
        return ItemUUID(id=self.id, type=self.family)

    @property
    def real_price(self) -> float:
        return self.reduced_price if self.reduced_price is not None else self.price

    def to_array(self) -> Dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "family": self.family,
                "name": self.name,
                "description": self.description or None,
                "price": self.price,
                "reduced_price": self.reduced_price,
                "rating": self.rating,
                "stock": self.stock,
                "brand": self.brand.to_array() if self.brand else None,
                "manufacturers": [m.to_array() for m in self.manufacturers],
                "categories": [c.to_array() for c in self.categories],
                "tags": [t.to_array() for t in self.tags],
                "stores": list(self.stores),
                "coordinate": self.coordinate.to_array() if self.coordinate else None,
                "metadata": dict(self.metadata),
            }
        )

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Product:
        brand = array.get("brand")
        coordinate = array.get("coordinate")
        try:
            return cls(
                id=str(require(array, "id", "Product")),
                name=str(require(array, "name", "Product")),
                family=str(array.get("family") or "product"),
                description=str(array.get("description") or ""),
                price=float(array.get("price", 0.0)),
                reduced_price=(
                    float(array["reduced_price"]) if array.get("reduced_price") is not None else None
                ),
                rating=float(array["rating"]) if array.get("rating") is not None else None,
                stock=int(array["stock"]) if array.get("stock") is not None else None,
                brand=Brand.create_from_array(brand) if brand else None,
                manufacturers=[
                    Manufacturer.create_from_array(m) for m in array.get("manufacturers") or []
                ],
                categories=[Category.create_from_array(c) for c in array.get("categories") or []],
                tags=[Tag.create_from_array(t) for t in array.get("tags") or []],
                stores=[str(s) for s in array.get("stores") or []],
                coordinate=Coordinate.create_from_array(coordinate) if coordinate else None,
                metadata=dict(array.get("metadata") or {}),
            )
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Malformed product map: {exc}") from exc
