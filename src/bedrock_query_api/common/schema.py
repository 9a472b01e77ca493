"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ANTHROPIC_VERSION = "bedrock-2023-05-31"
MAX_TOKENS = 512
NO_CONTENT_FALLBACK = "No content returned from model."

class TextBlock(BaseModel):
    type: str = "text"
    text: str

class Message(BaseModel):
    role: str
    content: list[TextBlock]

class ModelPayload(BaseModel):
    """Anthropic Messages request body for Bedrock InvokeModel."""
    anthropic_version: str = ANTHROPIC_VERSION
    max_tokens: int = MAX_TOKENS
    messages: list[Message]

    @classmethod
    def for_prompt(cls, prompt: str, max_tokens: int = MAX_TOKENS) -> "ModelPayload":
        return cls(
            max_tokens=max_tokens,
            messages=[Message(role="user", content=[TextBlock(text=prompt)])],
        )

class ContentBlock(BaseModel):
    type: str | None = None
    text: str | None = None

class Usage(BaseModel):
    input_tokens: int | None = None
    output_tokens: int | None = None

class ModelResponse(BaseModel):
    """Decoded Bedrock reply. Every field is optional; unknown fields are ignored."""
    content: list[ContentBlock] | None = None
    usage: Usage | None = None

    @property
    def answer_text(self) -> str:
        if self.content and self.content[0].text is not None:
            return self.content[0].text
        return NO_CONTENT_FALLBACK

    @property
    def input_tokens(self) -> int | None:
        return self.usage.input_tokens if self.usage else None

    @property
    def output_tokens(self) -> int | None:
        return self.usage.output_tokens if self.usage else None

    @property
    def total_tokens(self) -> int | None:
        if self.input_tokens is None or self.output_tokens is None:
            return None
        return self.input_tokens + self.output_tokens

class MetricsRecord(BaseModel):
    """Per-request telemetry, logged and echoed under "meta"."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cold_start: bool
    total_latency_ms: int
    inference_latency_ms: int
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

@dataclass
class HandlerResult:
    """Status code and JSON body produced for one inbound request."""
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
