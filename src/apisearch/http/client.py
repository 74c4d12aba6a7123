"""Asynchronous HTTP transport for the search service.

Sends a ``Query`` wire map through httpx and rebuilds the ``Result``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from apisearch.config import Settings
from apisearch.exceptions import ConfigError, TransportError
from apisearch.http.endpoints import Endpoints
from apisearch.query.query import Query
from apisearch.result.result import Result

logger = logging.getLogger("apisearch.http")


class HttpClient:
    def __init__(
        self,
        *,
        base_url: str,
        app_id: str,
        token: str,
        index: Optional[str] = None,
        version: str = "v1",
        verify_ssl: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self.token = token
        self.index = index
        self.version = version
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpClient:
        cfg = settings.client
        if not cfg.base_url or not cfg.app_id or not cfg.token:
            raise ConfigError(
                "Apisearch is not configured. Set APISEARCH_CLIENT__BASE_URL, "
                "APISEARCH_CLIENT__APP_ID, APISEARCH_CLIENT__TOKEN."
            )
        return cls(
            base_url=cfg.base_url,
            app_id=cfg.app_id,
            token=cfg.token,
            index=cfg.index,
            version=cfg.version,
            verify_ssl=cfg.verify_ssl,
            timeout=cfg.timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            verify=self.verify_ssl,
            headers={"Accept": "application/json"},
        )

    def _params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"app_id": self.app_id, "token": self.token}
        if self.index:
            params["index"] = self.index
        return params

    async def query(self, query: Query) -> Result:
        """Run a query and return the decoded result.

        Raises TransportError on error statuses or non-JSON bodies and
        FormatError when the body is not a valid result map.
        """
        endpoint = Endpoints.get(f"{self.version}-query") or {"path": f"/{self.version}"}
        params = self._params()
        params["query"] = json.dumps(query.to_array())
        logger.debug("GET %s q=%r page=%d", endpoint["path"], query.get_query_text(), query.get_page())
        async with self._client() as client:
            try:
                resp = await client.get(endpoint["path"], params=params)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise TransportError(
                    f"Search service answered {exc.response.status_code} for {endpoint['path']}"
                ) from exc
            except httpx.HTTPError as exc:
                raise TransportError(f"Search service unreachable: {exc}") from exc
            logger.debug("Search service answered %d", resp.status_code)
            try:
                data = resp.json()
            except ValueError as exc:
                raise TransportError("Search service returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise TransportError("Search service returned an unexpected payload")
        return Result.create_from_array(data)
