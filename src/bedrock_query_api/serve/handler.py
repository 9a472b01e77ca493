"""Request handler for POST /query.

Parses the body, calls the inference client once, and returns a HandlerResult.
Exactly one structured log line is written per request that passes validation:
a "bedrock_metrics" line on success or an "error" line on failure.
"""
from __future__ import annotations
import json
import logging
import threading
import time
import traceback
from typing import Any

from bedrock_query_api.bedrock.client import InferenceClient
from bedrock_query_api.common.logging_setup import METRICS_LOGGER_NAME
from bedrock_query_api.common.schema import (
    MAX_TOKENS,
    HandlerResult,
    MetricsRecord,
    ModelPayload,
)
from bedrock_query_api.common.templates import DEFAULT_TEMPLATE, render_prompt

LOGGER = logging.getLogger("bedrock_query.handler")
METRICS_LOGGER = logging.getLogger(METRICS_LOGGER_NAME)

MISSING_QUERY_ERROR = 'Missing "query" string in request body.'
INTERNAL_ERROR = "Internal server error"

class ColdStartTracker:
    """Reports True once, for the first request consumed by this process."""

    def __init__(self) -> None:
        self._cold = True
        self._lock = threading.Lock()

    def consume(self) -> bool:
        with self._lock:
            was_cold, self._cold = self._cold, False
        return was_cold

def extract_query(raw_body: str | bytes | None) -> str | None:
    """Return the non-empty "query" string from a JSON body, or None."""
    if not raw_body:
        return None
    try:
        data: Any = json.loads(raw_body)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    query = data.get("query")
    if not isinstance(query, str) or not query:
        return None
    return query

def _ms_since(start: float) -> int:
    return int((time.time() - start) * 1000)

class QueryHandler:
    """Turns one inbound request body into a HandlerResult."""

    def __init__(
        self,
        client: InferenceClient,
        cold_start: ColdStartTracker,
        verbose_errors: bool = False,
        template: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.client = client
        self.cold_start = cold_start
        self.verbose_errors = verbose_errors
        self.template = template

    def handle(self, raw_body: str | bytes | None) -> HandlerResult:
        invocation_start = time.time()

        query = extract_query(raw_body)
        if query is None:
            return HandlerResult(400, {"error": MISSING_QUERY_ERROR})

        was_cold_start = self.cold_start.consume()
        try:
            payload = ModelPayload.for_prompt(
                render_prompt(self.template, query), max_tokens=MAX_TOKENS
            )

            call_start = time.time()
            response = self.client.invoke(payload)
            inference_latency_ms = _ms_since(call_start)

            answer = response.answer_text
            metrics = MetricsRecord(
                cold_start=was_cold_start,
                total_latency_ms=_ms_since(invocation_start),
                inference_latency_ms=inference_latency_ms,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                total_tokens=response.total_tokens,
            )
        except Exception as e:
            LOGGER.error(
                json.dumps({
                    "type": "error",
                    "message": str(e),
                    "stack": traceback.format_exc(),
                })
            )
            body: dict[str, Any] = {"error": INTERNAL_ERROR}
            if self.verbose_errors:
                body["details"] = str(e)
            return HandlerResult(500, body)

        meta = metrics.as_dict()
        METRICS_LOGGER.info(json.dumps({"type": "bedrock_metrics", **meta}))
        return HandlerResult(200, {"answer": answer, "meta": meta})
