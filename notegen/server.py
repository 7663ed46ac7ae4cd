"""FastAPI server for notegen."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from notegen.config import load_config
from notegen.generation.handler import GenerationHandler, HandlerResponse
from notegen.generation.invoker import make_client
from notegen.store.base import backend_name, get_store

logger = logging.getLogger("notegen.server")

app = FastAPI(title="notegen", version="0.1.0")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(response: HandlerResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body, headers=CORS_HEADERS)


@app.options("/generate-notebook-content")
async def generate_notebook_content_preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@app.post("/generate-notebook-content")
async def generate_notebook_content(request: Request) -> JSONResponse:
    raw = await request.body()
    logger.info("POST /generate-notebook-content (%d bytes)", len(raw))

    try:
        config = load_config()
        store = get_store(config.store)
    except Exception:
        logger.exception("Could not load configuration or open store")
        return _json(HandlerResponse.internal_error())

    async with make_client(config.generation) as client:
        handler = GenerationHandler(config.generation, store, client)
        response = await handler.handle(raw)
    return _json(response)


@app.get("/api/health")
async def health() -> Any:
    config = load_config()
    try:
        store = backend_name(config.store)
    except ValueError as e:
        logger.warning("Health check: %s", e)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "generation_configured": config.generation.is_configured, "error": str(e)},
        )
    return {"ok": True, "generation_configured": config.generation.is_configured, "store": store}
