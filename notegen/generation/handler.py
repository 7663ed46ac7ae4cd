"""Request orchestration: resolve, invoke, reconcile, persist.

Every request that gets past validation and the configuration check ends
with exactly one terminal status write, except when the completing write
itself is rejected by the store.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from notegen.config import GenerationConfig
from notegen.core import FailureKind, Result
from notegen.generation.invoker import check_configuration, invoke
from notegen.generation.reconciler import ContentBundle, apply, reconcile
from notegen.generation.request import GenerationRequest
from notegen.generation.resolver import resolve
from notegen.store.base import Store
from notegen.store.records import GenerationStatus

logger = logging.getLogger("notegen.generation")

INTERNAL_ERROR = "Internal server error"
SUCCESS_MESSAGE = "Notebook content generated successfully"


class HandlerResponse(BaseModel):
    """Status and JSON body for the caller. ``code`` names the failing stage and stays out of the body."""

    status_code: int = 200
    body: dict[str, Any] = Field(default_factory=dict)
    code: str | None = None

    @classmethod
    def from_result(cls, status_code: int, result: Result[Any]) -> HandlerResponse:
        diag = result.first_error
        if diag is None:
            return cls.internal_error()
        return cls(status_code=status_code, body={"error": diag.message}, code=diag.code)

    @classmethod
    def internal_error(cls) -> HandlerResponse:
        """Generic 500 for failures that were not classified by a stage."""
        result: Result[None] = Result()
        result.error(FailureKind.UNKNOWN_ERROR, INTERNAL_ERROR)
        return cls.from_result(500, result)

    @classmethod
    def success(cls, bundle: ContentBundle) -> HandlerResponse:
        return cls(
            body={
                "success": True,
                "title": bundle.title,
                "description": bundle.description,
                "icon": bundle.icon,
                "color": bundle.color,
                "exampleQuestions": bundle.example_questions,
                "message": SUCCESS_MESSAGE,
            }
        )


class GenerationHandler:
    """Runs one generation request against a store and an HTTP client."""

    def __init__(self, config: GenerationConfig, store: Store, client: httpx.AsyncClient) -> None:
        self._config = config
        self._store = store
        self._client = client

    async def handle(self, raw: bytes | str) -> HandlerResponse:
        """Parse and run a request; unexpected errors end in a best-effort failed write."""
        request: GenerationRequest | None = None
        try:
            request = GenerationRequest.parse(raw)
            return await self.run(request)
        except Exception:
            logger.exception("Notebook generation error")
            if request is not None and request.notebook_id:
                await self._mark_failed_quietly(request.notebook_id)
            return HandlerResponse.internal_error()

    async def run(self, request: GenerationRequest) -> HandlerResponse:
        checked = request.check_required()
        if not checked.ok or checked.data is None:
            return HandlerResponse.from_result(400, checked)
        notebook_id = checked.data

        logger.info(
            "Processing request: notebook=%s source_type=%s file_path=%s",
            notebook_id,
            request.source_type,
            request.file_path,
        )

        configured = check_configuration(self._config)
        if not configured.ok:
            return HandlerResponse.from_result(500, configured)

        await self._set_status(notebook_id, GenerationStatus.GENERATING)

        resolved = await resolve(self._store, request)
        if not resolved.ok or resolved.data is None:
            return await self._fail(notebook_id, resolved)

        logger.info("Calling generation service for notebook %s", notebook_id)
        generated = await invoke(self._client, self._config, resolved.data)
        if not generated.ok:
            return await self._fail(notebook_id, generated)

        reconciled = reconcile(generated.data)
        if not reconciled.ok or reconciled.data is None:
            return await self._fail(notebook_id, reconciled)

        applied = await apply(self._store, notebook_id, reconciled.data)
        if not applied.ok:
            return HandlerResponse.from_result(500, applied)

        return HandlerResponse.success(reconciled.data)

    async def _fail(self, notebook_id: str, result: Result[Any]) -> HandlerResponse:
        diag = result.first_error
        logger.warning("Generation failed for notebook %s: %s", notebook_id, diag)
        await self._set_status(notebook_id, GenerationStatus.FAILED)
        return HandlerResponse.from_result(500, result)

    async def _set_status(self, notebook_id: str, status: GenerationStatus) -> None:
        written = await self._store.update_notebook(notebook_id, {"generation_status": status.value})
        if not written.ok:
            logger.warning("Could not set notebook %s to %s: %s", notebook_id, status, written.first_error)

    async def _mark_failed_quietly(self, notebook_id: str) -> None:
        try:
            await self._set_status(notebook_id, GenerationStatus.FAILED)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to update notebook %s status to failed", notebook_id)
