"""Local JSON-file store. Saves to {root}/notebooks.json and {root}/sources.json."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from notegen.core import Result
from notegen.store.base import check_notebook_fields, check_source_columns
from notegen.store.records import NotebookRecord, SourceRecord

logger = logging.getLogger("notegen.store")


class FileStore:
    """Keeps notebooks and sources in memory with optional disk persistence.

    With ``root=None`` nothing is written to disk.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root
        self._notebooks: dict[str, NotebookRecord] = {}
        self._sources: list[SourceRecord] = []
        if root is not None:
            root.mkdir(parents=True, exist_ok=True)
            self._load(root)

    def _load(self, root: Path) -> None:
        nb_path = root / "notebooks.json"
        if nb_path.exists():
            data = json.loads(nb_path.read_text())
            self._notebooks = {k: NotebookRecord.model_validate(v) for k, v in data.items()}
        src_path = root / "sources.json"
        if src_path.exists():
            self._sources = [SourceRecord.model_validate(s) for s in json.loads(src_path.read_text())]

    def _write(self, name: str, data: object) -> None:
        """Atomic write: write to .tmp, then rename."""
        if self._root is None:
            return
        path = self._root / name
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(data, indent=2, default=str) + "\n")
        tmp_path.rename(path)

    def save(self) -> None:
        self._write("notebooks.json", {k: nb.model_dump(mode="json") for k, nb in self._notebooks.items()})
        self._write("sources.json", [s.model_dump(mode="json", exclude_none=True) for s in self._sources])

    def add_source(self, source: SourceRecord) -> SourceRecord:
        """Append a source row, stamping created_at when missing, and persist."""
        if source.created_at is None:
            source.created_at = datetime.now(UTC).isoformat()
        self._sources.append(source)
        self.save()
        return source

    def put_notebook(self, notebook: NotebookRecord) -> None:
        self._notebooks[notebook.id] = notebook
        self.save()

    def get_notebook(self, notebook_id: str) -> NotebookRecord | None:
        return self._notebooks.get(notebook_id)

    async def latest_source(
        self, notebook_id: str, source_type: str, columns: Iterable[str]
    ) -> Result[SourceRecord]:
        result: Result[SourceRecord] = Result()
        cols = check_source_columns(columns)
        matches = [s for s in self._sources if s.notebook_id == notebook_id and s.type == source_type]
        if not matches:
            result.error("NOT_FOUND", f"No {source_type} source for notebook {notebook_id}")
            return result
        latest = max(matches, key=lambda s: s.created_at or "")
        result.data = SourceRecord.model_validate(latest.model_dump(include=set(cols)))
        return result

    async def update_notebook(self, notebook_id: str, fields: dict[str, Any]) -> Result[None]:
        """Apply fields to a notebook, creating the row if it does not exist yet."""
        result: Result[None] = Result()
        check_notebook_fields(fields)
        existing = self._notebooks.get(notebook_id) or NotebookRecord(id=notebook_id)
        row = {**existing.model_dump(), **fields, "updated_at": datetime.now(UTC).isoformat()}
        self._notebooks[notebook_id] = NotebookRecord.model_validate(row)
        try:
            self.save()
        except OSError as e:
            result.error("WRITE_ERROR", f"Failed to save notebook {notebook_id}: {e}")
            return result
        logger.info("Updated notebook %s (%s)", notebook_id, ", ".join(sorted(fields)))
        return result
