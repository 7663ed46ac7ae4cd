"""Shared test fixtures for notegen tests."""

from __future__ import annotations

import json
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Any

import httpx
import pytest

from notegen.config import ENV_OVERRIDES, GenerationConfig
from notegen.core import Result
from notegen.store.base import reset_store
from notegen.store.file import FileStore
from notegen.store.records import NotebookRecord, SourceRecord

GENERATION_URL = "https://generator.test/notebook"
GENERATION_AUTH = "Bearer test-token"


class RecordingStore(FileStore):
    """In-memory FileStore that records every lookup and write."""

    def __init__(self, root: Path | None = None) -> None:
        super().__init__(root)
        self.lookups: list[tuple[str, str, list[str]]] = []
        self.writes: list[tuple[str, dict[str, Any]]] = []
        self.fail_updates_with: set[str] = set()

    async def latest_source(
        self, notebook_id: str, source_type: str, columns: Iterable[str]
    ) -> Result[SourceRecord]:
        cols = list(columns)
        self.lookups.append((notebook_id, source_type, cols))
        return await super().latest_source(notebook_id, source_type, cols)

    async def update_notebook(self, notebook_id: str, fields: dict[str, Any]) -> Result[None]:
        self.writes.append((notebook_id, dict(fields)))
        status = fields.get("generation_status")
        if status in self.fail_updates_with:
            result: Result[None] = Result()
            result.error("QUERY_ERROR", f"update rejected for status {status}")
            return result
        return await super().update_notebook(notebook_id, fields)

    @property
    def statuses(self) -> list[str]:
        return [f["generation_status"] for _, f in self.writes if "generation_status" in f]


class GenerationService:
    """Stand-in for the external generation endpoint."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def make_generation_config(**overrides: Any) -> GenerationConfig:
    values: dict[str, Any] = {"url": GENERATION_URL, "auth": GENERATION_AUTH}
    values.update(overrides)
    return GenerationConfig(**values)


def seed_notebook(store: FileStore, notebook_id: str = "n1") -> NotebookRecord:
    notebook = NotebookRecord(id=notebook_id, title="Untitled notebook")
    store.put_notebook(notebook)
    return notebook


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Point config at a temp dir and clear generation/store env vars."""
    monkeypatch.setenv("NOTEGEN_HOME", str(tmp_path / "home"))
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
    yield
    reset_store()
