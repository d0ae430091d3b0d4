"""Async Cloudant REST client.

Every operation is a single request (or a read-modify-write pair for
permissions) with no retries. Missing configuration is only reported when
an operation is attempted, so the bot can start without credentials.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from couchchat.cloudant.errors import CloudantAPIError, CloudantConfigError, CloudantError
from couchchat.cloudant.types import DatabaseInfo, ViewName, ViewRow
from couchchat.config.models import CloudantConfig

logger = logging.getLogger(__name__)

DESIGN_PREFIX = "_design/"


def _db_path(database: str) -> str:
    return "/" + quote(database, safe="")


def _security_path(database: str) -> str:
    return f"/_api/v2/db/{quote(database, safe='')}/_security"


def _api_error(response: httpx.Response) -> CloudantAPIError:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return CloudantAPIError(
            response.status_code,
            str(body.get("error") or response.reason_phrase),
            body.get("reason"),
        )
    return CloudantAPIError(response.status_code, response.reason_phrase or "error")


class CloudantClient:
    """Operations the chat commands need from Cloudant."""

    def __init__(
        self,
        config: CloudantConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    @property
    def view_limit(self) -> int:
        return self._config.view_limit

    def _client(self) -> httpx.AsyncClient:
        base_url = self._config.get_base_url()
        if not base_url:
            raise CloudantConfigError(
                "The CLOUDANT_ENDPOINT is not set; Cloudant operations cannot be performed."
            )
        if self._config.password is None:
            raise CloudantConfigError(
                "The CLOUDANT_PASSWORD is not set; Cloudant operations cannot be performed."
            )
        username = self._config.get_api_username() or self._config.get_account() or ""
        return httpx.AsyncClient(
            base_url=base_url,
            auth=(username, self._config.password.get_secret_value()),
            headers={"Accept": "application/json"},
            timeout=self._config.timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        async with self._client() as client:
            logger.debug(f"{method} {path}")
            try:
                response = await client.request(method, path, params=params, json=json)
            except httpx.HTTPError as e:
                raise CloudantError(f"Request to Cloudant failed: {e}") from e

        if response.status_code >= 400:
            raise _api_error(response)
        try:
            return response.json()
        except ValueError as e:
            raise CloudantError(
                f"Cloudant returned a malformed response for {method} {path}"
            ) from e

    async def list_databases(self) -> list[str]:
        """Names of all databases."""
        body = await self._request("GET", "/_all_dbs")
        return [str(name) for name in body]

    async def get_database_info(self, database: str) -> DatabaseInfo:
        body = await self._request("GET", _db_path(database))
        return DatabaseInfo.from_dict(database, body)

    async def create_database(self, database: str) -> dict[str, Any]:
        return await self._request("PUT", _db_path(database))

    async def get_permissions(self, database: str, user: str) -> list[str]:
        """Capabilities currently granted to ``user``; empty if none."""
        body = await self._request("GET", _security_path(database))
        security = body.get("cloudant") or {}
        return list(security.get(user) or [])

    async def set_permissions(
        self, database: str, user: str, permissions: Sequence[str]
    ) -> dict[str, Any]:
        """Replace the capabilities of ``user``, leaving other users untouched."""
        body = await self._request("GET", _security_path(database))
        security = dict(body.get("cloudant") or {})
        security[user] = list(permissions)
        return await self._request(
            "PUT", _security_path(database), json={"cloudant": security}
        )

    async def list_views(self, database: str) -> list[ViewName]:
        """Every view of every design document in ``database``."""
        body = await self._request(
            "GET",
            f"{_db_path(database)}/_all_docs",
            params={
                "startkey": '"_design"',
                "endkey": '"_design0"',
                "include_docs": "true",
            },
        )
        views: list[ViewName] = []
        for row in body.get("rows") or []:
            doc = row.get("doc") or {}
            if not doc.get("views"):
                continue
            key = row.get("key") or row.get("id") or ""
            design = key.removeprefix(DESIGN_PREFIX)
            views.extend(ViewName(design=design, view=name) for name in doc["views"])
        return views

    async def run_view(
        self,
        database: str,
        design: str,
        view: str,
        keys: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[ViewRow]:
        """Run a view, optionally restricted to ``keys``."""
        path = (
            f"{_db_path(database)}/_design/{quote(design, safe='')}"
            f"/_view/{quote(view, safe='')}"
        )
        params = {"limit": limit or self._config.view_limit}
        if keys:
            body = await self._request("POST", path, params=params, json={"keys": list(keys)})
        else:
            body = await self._request("GET", path, params=params)
        return [ViewRow.from_dict(row) for row in body.get("rows") or []]
