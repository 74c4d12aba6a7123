from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from apisearch.exceptions import UUIDError
from apisearch.model.base import require

SEPARATOR = "~"


@dataclass(frozen=True, slots=True)
class ItemUUID:
    """Composite identity of an entity: its id scoped by its type."""

    id: str
    type: str

    def compose_uuid(self) -> str:
        return f"{self.type}{SEPARATOR}{self.id}"

    @classmethod
    def create_by_composed_uuid(cls, composed_uuid: str) -> ItemUUID:
        """Parse a ``type~id`` string.

        Raises UUIDError when either part is missing.
        """
        type_, sep, id_ = composed_uuid.partition(SEPARATOR)
        if not sep or not type_ or not id_:
            raise UUIDError(f"Invalid composed UUID: '{composed_uuid}'. Expected 'type~id'")
        return cls(id=id_, type=type_)

    def to_array(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type}

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> ItemUUID:
        return cls(
            id=str(require(array, "id", "ItemUUID")),
            type=str(require(array, "type", "ItemUUID")),
        )
