"""Interpret generation responses and persist the resulting notebook content.

The service answers in one of two shapes: content nested under ``output``
or the same fields at the top level. Both map onto one ContentBundle. Only
``title`` decides whether a response is usable; the other fields are taken
as they come and defaulted when empty.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from notegen.core import FailureKind, Result
from notegen.store.base import Store
from notegen.store.records import GenerationStatus

logger = logging.getLogger("notegen.generation")

DEFAULT_ICON = "📝"
DEFAULT_COLOR = "gray"

INVALID_FORMAT = "Invalid response format from web service"
MISSING_TITLE = "No title in response from web service"
UPDATE_FAILED = "Failed to update notebook"


class GeneratedContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Any = None
    summary: Any = None
    notebook_icon: Any = None
    background_color: Any = None
    example_questions: Any = None


class WrappedResponse(BaseModel):
    kind: Literal["wrapped"] = "wrapped"
    output: GeneratedContent

    @property
    def content(self) -> GeneratedContent:
        return self.output


class FlatResponse(GeneratedContent):
    kind: Literal["flat"] = "flat"

    @property
    def content(self) -> GeneratedContent:
        return self


GenerationResponse = WrappedResponse | FlatResponse


def _text(value: Any) -> str | None:
    """Empty values become None; anything else is kept as a string."""
    if not value:
        return None
    return value if isinstance(value, str) else str(value)


def _questions(value: Any) -> list[Any]:
    if not value:
        return []
    return list(value) if isinstance(value, list) else [value]


class ContentBundle(BaseModel):
    title: str
    description: str | None = None
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    example_questions: list[Any] = Field(default_factory=list)

    @classmethod
    def from_content(cls, content: GeneratedContent) -> ContentBundle:
        """Apply defaults. Empty strings count as absent."""
        return cls(
            title=_text(content.title) or "",
            description=_text(content.summary),
            icon=_text(content.notebook_icon) or DEFAULT_ICON,
            color=_text(content.background_color) or DEFAULT_COLOR,
            example_questions=_questions(content.example_questions),
        )

    def to_update(self) -> dict[str, Any]:
        """Notebook columns for the single completing write."""
        return {
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "example_questions": self.example_questions,
            "generation_status": GenerationStatus.COMPLETED.value,
        }


def parse_response(raw: Any) -> Result[GenerationResponse]:
    """Pick the response shape: truthy ``output`` wins, then a truthy top-level ``title``."""
    result: Result[GenerationResponse] = Result()
    if isinstance(raw, dict) and raw.get("output"):
        output = raw["output"]
        # Non-object output carries no fields, so it ends up as a missing title.
        content = GeneratedContent.model_validate(output) if isinstance(output, dict) else GeneratedContent()
        result.data = WrappedResponse(output=content)
        return result
    if isinstance(raw, dict) and raw.get("title"):
        result.data = FlatResponse.model_validate({k: v for k, v in raw.items() if k != "kind"})
        return result

    logger.error("Unexpected response format: %s", raw)
    result.error(FailureKind.RECONCILIATION_FAILURE, INVALID_FORMAT, hint="unexpected response format")
    return result


def reconcile(raw: Any) -> Result[ContentBundle]:
    """Validate a raw service response into a ContentBundle."""
    result: Result[ContentBundle] = Result()
    parsed = parse_response(raw)
    if not parsed.ok or parsed.data is None:
        result.diagnostics.extend(parsed.diagnostics)
        return result

    content = parsed.data.content
    if not content.title:
        logger.error("No title returned from generation service")
        result.error(FailureKind.RECONCILIATION_FAILURE, MISSING_TITLE, hint="missing title")
        return result

    result.data = ContentBundle.from_content(content)
    return result


async def apply(store: Store, notebook_id: str, bundle: ContentBundle) -> Result[None]:
    """Write all content fields and mark the notebook completed in one update."""
    result: Result[None] = Result()
    written = await store.update_notebook(notebook_id, bundle.to_update())
    if not written.ok:
        logger.error("Notebook update error: %s", written.first_error)
        error = written.first_error
        result.error(FailureKind.PERSIST_FAILURE, UPDATE_FAILED, hint=error.message if error else None)
        return result

    logger.info("Updated notebook %s with example questions: %s", notebook_id, bundle.example_questions)
    return result
