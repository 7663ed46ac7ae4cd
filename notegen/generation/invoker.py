"""Calls to the external content-generation service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from notegen.config import GenerationConfig
from notegen.core import FailureKind, Result
from notegen.generation.request import GenerationPayload

logger = logging.getLogger("notegen.generation")

CONFIG_MISSING = "Web service configuration missing"
SERVICE_FAILED = "Failed to generate content from web service"


def check_configuration(config: GenerationConfig) -> Result[None]:
    """Both the endpoint URL and the auth token must be set."""
    result: Result[None] = Result()
    if not config.is_configured:
        logger.error("Missing generation config: has_url=%s has_auth=%s", bool(config.url), bool(config.auth))
        result.error(FailureKind.CONFIG_ERROR, CONFIG_MISSING)
    return result


def make_client(config: GenerationConfig) -> httpx.AsyncClient:
    """HTTP client for the generation service. No timeout unless one is configured."""
    return httpx.AsyncClient(timeout=config.timeout_seconds)


async def invoke(client: httpx.AsyncClient, config: GenerationConfig, payload: GenerationPayload) -> Result[Any]:
    """POST the payload once and return the decoded JSON body.

    A non-2xx status is a failure; transport errors and undecodable bodies
    propagate.
    """
    result: Result[Any] = Result()
    body = payload.to_wire()
    logger.info("Sending payload to generation service: %s", body)

    response = await client.post(
        config.url,
        json=body,
        headers={"Authorization": config.auth, "Content-Type": "application/json"},
    )

    if not response.is_success:
        logger.error("Generation service error: %s %s", response.status_code, response.reason_phrase)
        logger.error("Error response: %s", response.text)
        result.error(
            FailureKind.INVOCATION_FAILURE,
            SERVICE_FAILED,
            hint=f"HTTP {response.status_code}: {response.text[:500]}",
        )
        return result

    result.data = response.json()
    logger.info("Generated data: %s", result.data)
    return result
