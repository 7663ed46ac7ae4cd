"""Postgres-backed store via asyncpg."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import asyncpg

from notegen.core import Result
from notegen.store.base import check_notebook_fields, check_source_columns
from notegen.store.records import SourceRecord

logger = logging.getLogger("notegen.store")


class PostgresStore:
    """Reads sources and updates notebooks with one connection per call."""

    def __init__(self, dsn: str, *, password: str | None = None) -> None:
        self._dsn = dsn
        self._password = password

    async def _connect(self) -> asyncpg.Connection[Any]:
        return await asyncpg.connect(self._dsn, password=self._password)

    async def latest_source(
        self, notebook_id: str, source_type: str, columns: Iterable[str]
    ) -> Result[SourceRecord]:
        result: Result[SourceRecord] = Result()
        cols = check_source_columns(columns)
        select = ", ".join(f'"{c}"' for c in cols)
        sql = (
            f"SELECT {select} FROM sources WHERE notebook_id = $1 AND type = $2 "
            "ORDER BY created_at DESC LIMIT 1"
        )

        try:
            conn = await self._connect()
        except Exception as e:  # noqa: BLE001
            result.error("CONN_ERROR", f"Connection failed: {e}")
            return result

        try:
            row = await conn.fetchrow(sql, notebook_id, source_type)
        except asyncpg.exceptions.PostgresError as e:
            result.error("QUERY_ERROR", f"Source lookup failed: {e}")
            return result
        finally:
            await conn.close()

        if row is None:
            result.error("NOT_FOUND", f"No {source_type} source for notebook {notebook_id}")
            return result
        result.data = SourceRecord.model_validate({k: _as_text(v) for k, v in dict(row).items()})
        return result

    async def update_notebook(self, notebook_id: str, fields: dict[str, Any]) -> Result[None]:
        result: Result[None] = Result()
        check_notebook_fields(fields)
        names = list(fields)
        assignments = ", ".join(f'"{name}" = ${i}' for i, name in enumerate(names, start=2))
        sql = f"UPDATE notebooks SET {assignments} WHERE id = $1"

        try:
            conn = await self._connect()
        except Exception as e:  # noqa: BLE001
            result.error("CONN_ERROR", f"Connection failed: {e}")
            return result

        try:
            status = await conn.execute(sql, notebook_id, *(fields[n] for n in names))
        except asyncpg.exceptions.PostgresError as e:
            result.error("QUERY_ERROR", f"Notebook update failed: {e}")
            return result
        finally:
            await conn.close()

        logger.info("Updated notebook %s (%s): %s", notebook_id, ", ".join(sorted(names)), status)
        return result


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()  # type: ignore[no-any-return]
    return str(value)
