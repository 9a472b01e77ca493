from __future__ import annotations

import base64
import json
from typing import Any

import pytest

import bedrock_query_api.serve.lambda_entry as lambda_mod
from bedrock_query_api.bedrock.client import BedrockClient
from bedrock_query_api.common.schema import ModelPayload, ModelResponse
from bedrock_query_api.common.templates import DEFAULT_TEMPLATE
from bedrock_query_api.serve.handler import ColdStartTracker, QueryHandler


class _FakeBedrock:
    def invoke(self, payload: ModelPayload) -> ModelResponse:
        return ModelResponse.model_validate(
            {"content": [{"type": "text", "text": "4"}], "usage": {"input_tokens": 5, "output_tokens": 1}}
        )


def _handler() -> QueryHandler:
    return QueryHandler(_FakeBedrock(), ColdStartTracker())


def test_rest_api_event() -> None:
    event: dict[str, Any] = {"httpMethod": "POST", "path": "/query", "body": '{"query": "What is 2+2?"}'}
    resp = lambda_mod.handle_event(_handler(), event)
    assert resp["statusCode"] == 200
    assert resp["headers"] == {"Content-Type": "application/json"}
    body = json.loads(resp["body"])
    assert body["answer"] == "4"
    assert body["meta"]["totalTokens"] == 6


def test_base64_body_is_decoded() -> None:
    raw = base64.b64encode(b'{"query": "hi"}').decode("ascii")
    resp = lambda_mod.handle_event(_handler(), {"body": raw, "isBase64Encoded": True})
    assert resp["statusCode"] == 200


def test_missing_body_is_400() -> None:
    resp = lambda_mod.handle_event(_handler(), {"body": None})
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": 'Missing "query" string in request body.'}


def test_handler_reuses_process_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    shared = _handler()
    monkeypatch.setattr(lambda_mod, "_default_handler", lambda: shared)

    first = json.loads(lambda_mod.handler({"body": '{"query": "a"}'}, None)["body"])
    second = json.loads(lambda_mod.handler({"body": '{"query": "b"}'}, None)["body"])
    assert first["meta"]["coldStart"] is True
    assert second["meta"]["coldStart"] is False


def test_default_handler_built_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("QUERY_API_CONFIG", raising=False)
    monkeypatch.setenv("MODEL_ID", "anthropic.claude-3-sonnet-20240229-v1:0")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("PROMPT_TEMPLATE_PATH", raising=False)
    monkeypatch.setattr(lambda_mod, "setup_logging", lambda level: None)
    lambda_mod._default_handler.cache_clear()
    try:
        built = lambda_mod._default_handler()
        assert built is lambda_mod._default_handler()
        assert isinstance(built.client, BedrockClient)
        assert built.client.model_id == "anthropic.claude-3-sonnet-20240229-v1:0"
        assert built.verbose_errors is True
        assert built.template == DEFAULT_TEMPLATE
        built.client.close()
    finally:
        lambda_mod._default_handler.cache_clear()


@pytest.mark.parametrize("body", ["abc", "not base64!", "éé"])
def test_undecodable_base64_body_is_400(body: str) -> None:
    resp = lambda_mod.handle_event(_handler(), {"body": body, "isBase64Encoded": True})
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": 'Missing "query" string in request body.'}


def test_default_handler_loads_configured_template(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    tpl = tmp_path / "prompt.txt"
    tpl.write_text("Q: {{input}}", encoding="utf-8")
    monkeypatch.delenv("QUERY_API_CONFIG", raising=False)
    monkeypatch.setenv("MODEL_ID", "m")
    monkeypatch.setenv("PROMPT_TEMPLATE_PATH", str(tpl))
    monkeypatch.setattr(lambda_mod, "setup_logging", lambda level: None)
    lambda_mod._default_handler.cache_clear()
    try:
        built = lambda_mod._default_handler()
        assert built.template == "Q: {{input}}"
        built.client.close()
    finally:
        lambda_mod._default_handler.cache_clear()
