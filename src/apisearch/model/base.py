"""Shared contracts for objects that travel over the wire.

Every request and response object converts itself to a plain, JSON-ready
mapping (``to_array``) and is rebuilt from one (``create_from_array``).
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol

from apisearch.exceptions import FormatError


class HttpTransportable(Protocol):
    """Object that can be encoded into a wire map."""

    def to_array(self) -> Dict[str, Any]: ...


class UUIDReference(Protocol):
    """Object that can be reduced to a composed ``type~id`` identity."""

    def compose_uuid(self) -> str: ...


def require(array: Mapping[str, Any], key: str, owner: str) -> Any:
    """Return ``array[key]`` or raise FormatError naming the owning type."""
    if not isinstance(array, Mapping):
        raise FormatError(f"{owner} expects a mapping, got {type(array).__name__}")
    if key not in array or array[key] is None:
        raise FormatError(f"{owner} is missing required key '{key}'")
    return array[key]
