"""Supabase/PostgREST-backed store via httpx."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from notegen.core import Result
from notegen.store.base import check_notebook_fields, check_source_columns
from notegen.store.records import SourceRecord

logger = logging.getLogger("notegen.store")


class RestStore:
    """Talks to ``{base_url}/rest/v1`` using the service credential."""

    def __init__(self, base_url: str, key: str, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = base_url.rstrip("/") + "/rest/v1"
        self._headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, headers=self._headers, transport=self._transport)

    async def latest_source(
        self, notebook_id: str, source_type: str, columns: Iterable[str]
    ) -> Result[SourceRecord]:
        result: Result[SourceRecord] = Result()
        cols = check_source_columns(columns)
        params = {
            "select": ",".join(cols),
            "notebook_id": f"eq.{notebook_id}",
            "type": f"eq.{source_type}",
            "order": "created_at.desc",
            "limit": "1",
        }
        try:
            async with self._client() as client:
                response = await client.get("/sources", params=params)
        except httpx.HTTPError as e:
            result.error("CONN_ERROR", f"Source lookup failed: {e}")
            return result

        if not response.is_success:
            result.error("QUERY_ERROR", f"Source lookup failed: HTTP {response.status_code}", hint=response.text)
            return result

        rows = response.json()
        if not rows:
            result.error("NOT_FOUND", f"No {source_type} source for notebook {notebook_id}")
            return result
        result.data = SourceRecord.model_validate(rows[0])
        return result

    async def update_notebook(self, notebook_id: str, fields: dict[str, Any]) -> Result[None]:
        result: Result[None] = Result()
        check_notebook_fields(fields)
        try:
            async with self._client() as client:
                response = await client.patch(
                    "/notebooks",
                    params={"id": f"eq.{notebook_id}"},
                    json=fields,
                    headers={"Prefer": "return=minimal"},
                )
        except httpx.HTTPError as e:
            result.error("CONN_ERROR", f"Notebook update failed: {e}")
            return result

        if not response.is_success:
            result.error("QUERY_ERROR", f"Notebook update failed: HTTP {response.status_code}", hint=response.text)
            return result

        logger.info("Updated notebook %s (%s)", notebook_id, ", ".join(sorted(fields)))
        return result
