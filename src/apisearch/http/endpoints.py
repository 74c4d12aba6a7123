"""Named endpoints of the search service.

Tokens are granted permissions by endpoint name. The helpers below build the
usual permission sets and convert names to and from the ``verb~~path`` form
the service stores.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

COMPOSED_SEPARATOR = "~~"

_ENDPOINTS: Dict[str, Dict[str, str]] = {
    # Index
    "v1-indices-get": {"name": "Get all indices", "description": "Get all indices", "path": "/v1/indices", "verb": "get"},
    "v1-index-create": {"name": "Index create", "description": "Reset your App index", "path": "/v1/index", "verb": "put"},
    "v1-index-delete": {"name": "Index delete", "description": "Delete your App index", "path": "/v1/index", "verb": "delete"},
    "v1-index-reset": {"name": "Index reset", "description": "Reset your App index", "path": "/v1/index/reset", "verb": "post"},
    "v1-index-check": {"name": "Index check", "description": "Check your index", "path": "/v1/index", "verb": "head"},
    "v1-index-config": {"name": "Index Config", "description": "Configure your index", "path": "/v1/index", "verb": "post"},
    # Tokens
    "v1-token-add": {"name": "Add token", "description": "Add token", "path": "/v1/token", "verb": "post"},
    "v1-token-delete": {"name": "Delete token", "description": "Delete token", "path": "/v1/token", "verb": "delete"},
    "v1-tokens-get": {"name": "Get all tokens", "description": "Get all tokens", "path": "/v1/tokens", "verb": "get"},
    "v1-tokens-delete": {"name": "Delete all tokens", "description": "Delete all tokens", "path": "/v1/tokens", "verb": "delete"},
    # Query and items
    "v1-query": {"name": "Query", "description": "Make queries", "path": "/v1", "verb": "get"},
    "v1-items-index": {"name": "Items index", "description": "Index your items", "path": "/v1/items", "verb": "post"},
    "v1-items-delete": {"name": "Items delete", "description": "Delete your items", "path": "/v1/items", "verb": "delete"},
    "v1-items-update": {"name": "Items update", "description": "Update your items", "path": "/v1/items", "verb": "put"},
    # Interactions
    "v1-interaction": {"name": "Add interaction", "description": "Push a new interaction", "path": "/v1/interaction", "verb": "get"},
    "v1-interactions-delete": {"name": "Delete Interactions", "description": "Delete all stored interactions", "path": "/v1/interactions", "verb": "delete"},
}


class Endpoints:
    @staticmethod
    def all() -> Dict[str, Dict[str, str]]:
        return {name: dict(data) for name, data in _ENDPOINTS.items()}

    @staticmethod
    def get(name: str) -> Dict[str, str] | None:
        data = _ENDPOINTS.get(name)
        return dict(data) if data else None

    @staticmethod
    def filter(permissions: Iterable[str]) -> List[str]:
        """Keep only the permissions naming a known endpoint."""
        return [p for p in permissions if p in _ENDPOINTS]

    @staticmethod
    def read_write() -> List[str]:
        return list(_ENDPOINTS)

    @staticmethod
    def index_write() -> List[str]:
        return [
            "v1-index-create",
            "v1-index-delete",
            "v1-items-index",
            "v1-items-delete",
            "v1-index-reset",
        ]

    @staticmethod
    def query_only() -> List[str]:
        return ["v1-query"]

    @staticmethod
    def tokens_only() -> List[str]:
        return ["v1-token-add", "v1-token-delete", "v1-tokens-get", "v1-tokens-delete"]

    @staticmethod
    def interaction_only() -> List[str]:
        return ["v1-interaction"]

    @staticmethod
    def compose(names: Iterable[str]) -> List[str]:
        """Turn endpoint names into ``verb~~path`` strings, dropping unknown names."""
        out: List[str] = []
        for name in names:
            data = _ENDPOINTS.get(name)
            if data:
                out.append(f"{data['verb']}{COMPOSED_SEPARATOR}{data['path']}".lower())
        return out

    @staticmethod
    def from_composed(composed: Iterable[str]) -> List[str]:
        inverse = {
            f"{d['verb']}{COMPOSED_SEPARATOR}{d['path']}".lower(): name
            for name, d in _ENDPOINTS.items()
        }
        return [inverse[c] for c in composed if c in inverse]
