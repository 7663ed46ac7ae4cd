"""Row shapes for the notebooks and sources tables."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


def _now() -> str:
    return datetime.now(UTC).isoformat()


class GenerationStatus(StrEnum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class SourceRecord(BaseModel):
    """One stored input for a notebook. Lookups may populate only some columns."""

    id: str | None = None
    notebook_id: str | None = None
    type: str | None = None
    title: str | None = None
    content: str | None = None
    url: str | None = None
    created_at: str | None = None


class NotebookRecord(BaseModel):
    id: str
    title: str = "Untitled notebook"
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    example_questions: list[Any] = Field(default_factory=list)
    generation_status: GenerationStatus | None = None
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)


SOURCE_COLUMNS = frozenset(SourceRecord.model_fields)
NOTEBOOK_COLUMNS = frozenset(NotebookRecord.model_fields) - {"id"}
