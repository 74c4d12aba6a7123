"""Entity collaborators, identities and geo value types."""

from .base import HttpTransportable, UUIDReference
from .coordinate import Coordinate
from .entities import Brand, Category, Manufacturer, Product, Tag
from .geo import CoordinateAndDistance, LocationRange, Square
from .item_uuid import ItemUUID

__all__ = [
    "HttpTransportable",
    "UUIDReference",
    "Coordinate",
    "Brand",
    "Category",
    "Manufacturer",
    "Product",
    "Tag",
    "CoordinateAndDistance",
    "LocationRange",
    "Square",
    "ItemUUID",
]
