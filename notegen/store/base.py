"""Store interface consumed by the generation flow, plus backend selection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlparse

from notegen.config import StoreConfig, default_store_dir
from notegen.core import Result
from notegen.store.records import NOTEBOOK_COLUMNS, SOURCE_COLUMNS, SourceRecord

logger = logging.getLogger("notegen.store")


class Store(Protocol):
    """The two operations the generation flow needs from persistence."""

    async def latest_source(
        self, notebook_id: str, source_type: str, columns: Iterable[str]
    ) -> Result[SourceRecord]:
        """Most recently created source row for a notebook and type."""
        ...

    async def update_notebook(self, notebook_id: str, fields: dict[str, Any]) -> Result[None]:
        """Unconditional update of a notebook row keyed by id."""
        ...


def check_source_columns(columns: Iterable[str]) -> list[str]:
    """Return columns as a list, rejecting anything not on SourceRecord."""
    cols = list(columns)
    unknown = [c for c in cols if c not in SOURCE_COLUMNS]
    if unknown or not cols:
        raise ValueError(f"Invalid source columns: {cols}")
    return cols


def check_notebook_fields(fields: dict[str, Any]) -> None:
    unknown = [k for k in fields if k not in NOTEBOOK_COLUMNS]
    if unknown or not fields:
        raise ValueError(f"Invalid notebook fields: {sorted(fields)}")


def backend_name(config: StoreConfig) -> str:
    """Name the backend a store URL selects: 'postgres', 'rest' or 'file'."""
    scheme = urlparse(config.url).scheme.lower()
    if scheme in ("postgres", "postgresql"):
        return "postgres"
    if scheme in ("http", "https"):
        return "rest"
    if scheme in ("", "file"):
        return "file"
    raise ValueError(f"Unsupported store URL scheme: {scheme!r}")


def open_store(config: StoreConfig) -> Store:
    """Build a store for the configured URL."""
    backend = backend_name(config)
    if backend == "postgres":
        from notegen.store.postgres import PostgresStore

        return PostgresStore(config.url, password=config.key or None)
    if backend == "rest":
        from notegen.store.rest import RestStore

        return RestStore(config.url, config.key)

    from notegen.store.file import FileStore

    root = Path(urlparse(config.url).path) if config.url else default_store_dir()
    return FileStore(root)


_store: Store | None = None
_store_url: str | None = None


def get_store(config: StoreConfig) -> Store:
    """Get the module-level store, rebuilding it when the store URL changes."""
    global _store, _store_url  # noqa: PLW0603
    if _store is None or _store_url != config.url:
        _store = open_store(config)
        _store_url = config.url
        logger.info("Opened %s store", backend_name(config))
    return _store


def reset_store() -> None:
    """Reset the singleton (for testing)."""
    global _store, _store_url  # noqa: PLW0603
    _store = None
    _store_url = None
