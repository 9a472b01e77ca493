"""FastAPI host for the query handler.

Endpoints:
- GET /health
- POST /query  { "query": "..." }
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from bedrock_query_api.bedrock.client import BedrockClient
from bedrock_query_api.common.config import load_settings
from bedrock_query_api.common.logging_setup import setup_logging
from bedrock_query_api.common.templates import template_for
from bedrock_query_api.serve.handler import ColdStartTracker, QueryHandler

LOGGER = logging.getLogger("bedrock_query.app")

def create_app(handler: QueryHandler | None = None, model_id: str | None = None) -> FastAPI:
    """
    Build the app.

    Args:
        handler: Pre-built handler. When omitted, settings are read from the
            environment at startup and a BedrockClient is opened for the
            lifetime of the app.
        model_id: Model id reported by /health when a handler is injected.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if handler is not None:
            yield
            return
        settings = load_settings()
        setup_logging(settings.log_level)
        template = template_for(settings.template_path)
        client = BedrockClient.from_settings(settings)
        app.state.model_id = settings.model_id
        app.state.handler = QueryHandler(
            client,
            cold_start=ColdStartTracker(),
            verbose_errors=settings.verbose_errors,
            template=template,
        )
        LOGGER.info("Serving model %s in %s", settings.model_id, settings.region)
        try:
            yield
        finally:
            client.close()

    app = FastAPI(title="bedrock-query-api", lifespan=lifespan)
    if handler is not None:
        app.state.handler = handler
        app.state.model_id = model_id

    async def _raw_body(request: Request) -> bytes:
        return await request.body()

    @app.get("/health")
    def health(request: Request) -> dict[str, str | None]:
        return {"status": "ok", "model": request.app.state.model_id}

    @app.post("/query")
    def query(request: Request, raw: bytes = Depends(_raw_body)) -> JSONResponse:
        result = request.app.state.handler.handle(raw)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return app

app = create_app()
