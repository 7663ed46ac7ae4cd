"""Inbound request and outbound payload models."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notegen.core import FailureKind, Result

MISSING_FIELDS = "notebookId and sourceType are required"


class GenerationRequest(BaseModel):
    """Body of a generate-notebook-content request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    notebook_id: str | None = Field(default=None, alias="notebookId")
    file_path: str | None = Field(default=None, alias="filePath")
    source_type: str | None = Field(default=None, alias="sourceType")

    @classmethod
    def parse(cls, raw: bytes | str) -> GenerationRequest:
        """Parse a raw JSON body. Raises ValueError on anything but a JSON object."""
        body: Any = json.loads(raw)
        if not isinstance(body, dict):
            raise ValueError(f"Request body must be a JSON object, got {type(body).__name__}")
        return cls.model_validate(body)

    def check_required(self) -> Result[str]:
        """Return the notebook id, or a validation error when either required field is empty."""
        result: Result[str] = Result()
        if not self.notebook_id or not self.source_type:
            result.error(FailureKind.VALIDATION_ERROR, MISSING_FIELDS)
            return result
        result.data = self.notebook_id
        return result


class GenerationPayload(BaseModel):
    """What gets POSTed to the generation service."""

    model_config = ConfigDict(populate_by_name=True)

    source_type: str = Field(alias="sourceType")
    content: str | None = None
    title: str | None = None
    file_path: str | None = Field(default=None, alias="filePath")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
