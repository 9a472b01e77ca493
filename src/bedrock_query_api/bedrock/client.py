"""Bedrock Runtime client adapter (InvokeModel over httpx).

One BedrockClient holds a single httpx.Client for the lifetime of the process;
each invoke() is a single attempt with no retry. Requests are SigV4-signed
with the process's AWS credentials unless a Bedrock API key is configured.
"""
from __future__ import annotations
import argparse
import logging
import time
from typing import Protocol
from urllib.parse import quote

import httpx
from botocore.credentials import Credentials
from pydantic import ValidationError

from bedrock_query_api.bedrock.auth import BedrockSigV4Auth
from bedrock_query_api.common.config import DEFAULT_REGION, Settings, load_settings
from bedrock_query_api.common.errors import DecodeError, InferenceCallError
from bedrock_query_api.common.logging_setup import setup_logging
from bedrock_query_api.common.schema import ModelPayload, ModelResponse
from bedrock_query_api.common.templates import DEFAULT_TEMPLATE, render_prompt

LOGGER = logging.getLogger("bedrock_query.client")

class InferenceClient(Protocol):
    def invoke(self, payload: ModelPayload) -> ModelResponse: ...

def _service_message(response: httpx.Response) -> str:
    """Pull the error message out of a Bedrock error body, if there is one."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        msg = data.get("message") or data.get("Message")
        if msg:
            return str(msg)
    return response.reason_phrase

class BedrockClient:
    """Long-lived connection handle to Bedrock Runtime for one model."""

    def __init__(
        self,
        model_id: str,
        endpoint: str,
        api_key: str | None = None,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
        region: str = DEFAULT_REGION,
        credentials: Credentials | None = None,
    ) -> None:
        """
        Args:
            api_key: Bedrock API key sent as a Bearer token. When unset, requests
                are SigV4-signed with `credentials` or the default AWS chain.
            region: Signing region for SigV4.
        """
        self.model_id = model_id
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        auth: httpx.Auth | None = None
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        else:
            auth = BedrockSigV4Auth(region, credentials)
        self._http = httpx.Client(
            base_url=endpoint,
            headers=headers,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
        credentials: Credentials | None = None,
    ) -> "BedrockClient":
        return cls(
            model_id=settings.model_id,
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            timeout=settings.timeout_s,
            transport=transport,
            region=settings.region,
            credentials=credentials,
        )

    @property
    def invoke_path(self) -> str:
        return f"/model/{quote(self.model_id, safe='')}/invoke"

    def invoke(self, payload: ModelPayload) -> ModelResponse:
        """
        Send one InvokeModel request and decode the reply.

        Raises:
            InferenceCallError: transport failure or non-2xx status.
            DecodeError: reply body is not a JSON model response.
        """
        body = payload.model_dump_json().encode("utf-8")
        try:
            r = self._http.post(self.invoke_path, content=body)
        except httpx.HTTPError as e:
            raise InferenceCallError(str(e)) from e
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise InferenceCallError(
                f"Bedrock returned {r.status_code}: {_service_message(r)}"
            ) from e

        try:
            return ModelResponse.model_validate_json(r.content)
        except ValidationError as e:
            raise DecodeError(f"Malformed Bedrock response: {e}") from e

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BedrockClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

def main() -> None:
    ap = argparse.ArgumentParser(description="Send one query to Bedrock and print the answer")
    ap.add_argument("--text", required=True, help="User input text")
    ap.add_argument("--cfg", default=None, help="Optional YAML config path")
    args = ap.parse_args()

    settings = load_settings(args.cfg)
    setup_logging(settings.log_level)

    payload = ModelPayload.for_prompt(render_prompt(DEFAULT_TEMPLATE, args.text))
    with BedrockClient.from_settings(settings) as client:
        start = time.time()
        resp = client.invoke(payload)
        latency_ms = int((time.time() - start) * 1000)
    LOGGER.info("Latency: %sms | in=%s out=%s", latency_ms, resp.input_tokens, resp.output_tokens)
    print(resp.answer_text)

if __name__ == "__main__":
    main()
