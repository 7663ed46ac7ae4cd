"""Source resolution: decide what content to forward for a notebook."""

from __future__ import annotations

import logging

from notegen.core import FailureKind, Result
from notegen.generation.request import GenerationPayload, GenerationRequest
from notegen.store.base import Store

logger = logging.getLogger("notegen.generation")

TEXT_UNAVAILABLE = "Failed to get text content for processing"
WEBSITE_UNAVAILABLE = "Failed to get website URL for processing"
NO_SOURCE_DATA = "No valid source data found for generation"


async def resolve(store: Store, request: GenerationRequest) -> Result[GenerationPayload]:
    """Build the payload for a request.

    ``text`` and ``website`` sources come from the most recent matching source
    row; every other type passes the caller's file path through untouched.
    Performs no writes.
    """
    result: Result[GenerationPayload] = Result()
    if not request.notebook_id or not request.source_type:
        raise ValueError("resolve() needs a notebook id and source type")
    notebook_id, source_type = request.notebook_id, request.source_type

    if source_type == "text":
        lookup = await store.latest_source(notebook_id, "text", ("content", "title"))
        source = lookup.data
        if not lookup.ok or source is None or not source.content:
            _log_lookup_failure("text content unavailable", lookup.first_error)
            result.error(FailureKind.RESOLUTION_FAILURE, TEXT_UNAVAILABLE, hint="text content unavailable")
            return result
        result.data = GenerationPayload(source_type=source_type, content=source.content, title=source.title)

    elif source_type == "website":
        lookup = await store.latest_source(notebook_id, "website", ("url", "title"))
        source = lookup.data
        if not lookup.ok or source is None or not source.url:
            _log_lookup_failure("website url unavailable", lookup.first_error)
            result.error(FailureKind.RESOLUTION_FAILURE, WEBSITE_UNAVAILABLE, hint="website url unavailable")
            return result
        result.data = GenerationPayload(source_type=source_type, file_path=source.url, title=source.title)

    elif request.file_path:
        result.data = GenerationPayload(source_type=source_type, file_path=request.file_path)

    else:
        logger.error("No valid source data found for generation")
        result.error(FailureKind.RESOLUTION_FAILURE, NO_SOURCE_DATA, hint="no valid source data")

    return result


def _log_lookup_failure(reason: str, diag: object) -> None:
    if diag is not None:
        logger.error("Source lookup failed (%s): %s", reason, diag)
    else:
        logger.error("Source lookup failed: %s", reason)
