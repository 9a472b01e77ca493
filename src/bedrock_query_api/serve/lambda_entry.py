"""AWS Lambda entry point for API Gateway proxy events (REST v1 or HTTP v2)."""
from __future__ import annotations
import base64
import json
from functools import lru_cache
from typing import Any

from bedrock_query_api.bedrock.client import BedrockClient
from bedrock_query_api.common.config import load_settings
from bedrock_query_api.common.logging_setup import setup_logging
from bedrock_query_api.common.templates import template_for
from bedrock_query_api.common.schema import HandlerResult
from bedrock_query_api.serve.handler import ColdStartTracker, QueryHandler

def event_body(event: dict[str, Any]) -> str | bytes | None:
    """Request body from a proxy event; undecodable base64 counts as no body."""
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except ValueError:  # binascii.Error or non-ASCII text
            return None
    return body

def to_proxy_response(result: HandlerResult) -> dict[str, Any]:
    return {
        "statusCode": result.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(result.body),
    }

def handle_event(query_handler: QueryHandler, event: dict[str, Any]) -> dict[str, Any]:
    return to_proxy_response(query_handler.handle(event_body(event)))

@lru_cache(maxsize=1)
def _default_handler() -> QueryHandler:
    """Built once per Lambda execution environment and reused."""
    settings = load_settings()
    setup_logging(settings.log_level)
    return QueryHandler(
        BedrockClient.from_settings(settings),
        cold_start=ColdStartTracker(),
        verbose_errors=settings.verbose_errors,
        template=template_for(settings.template_path),
    )

def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    return handle_event(_default_handler(), event)
