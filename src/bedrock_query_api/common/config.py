"""Runtime settings: optional YAML file overlaid by environment variables."""
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any

import yaml

from bedrock_query_api.common.errors import ConfigurationError

DEFAULT_REGION = "us-west-2"
DEFAULT_TIMEOUT_S = 20.0
CONFIG_PATH_ENV = "QUERY_API_CONFIG"

@dataclass(frozen=True)
class Settings:
    """Settings consumed by the client adapter and the hosts."""
    model_id: str
    region: str = DEFAULT_REGION
    api_key: str | None = None
    endpoint_url: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    log_level: str = "INFO"
    template_path: str | None = None

    @property
    def verbose_errors(self) -> bool:
        """Echo failure details to callers only when running at DEBUG."""
        return self.log_level.upper() == "DEBUG"

    @property
    def endpoint(self) -> str:
        if self.endpoint_url:
            return self.endpoint_url.rstrip("/")
        return f"https://bedrock-runtime.{self.region}.amazonaws.com"

def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data

def _pick(env_name: str, cfg: dict[str, Any], key: str) -> Any:
    value = os.getenv(env_name)
    if value:
        return value
    return cfg.get(key)

def load_settings(cfg_path: str | None = None) -> Settings:
    """
    Build Settings from an optional YAML file and the environment.

    Args:
        cfg_path: YAML config path. Defaults to $QUERY_API_CONFIG when set.

    Raises:
        ConfigurationError: MODEL_ID is missing or a value cannot be parsed.
    """
    cfg_path = cfg_path or os.getenv(CONFIG_PATH_ENV)
    cfg = load_cfg(cfg_path) if cfg_path else {}

    model_id = _pick("MODEL_ID", cfg, "model_id")
    if not model_id:
        raise ConfigurationError("MODEL_ID is not set")

    # Explicit model region, then the deployment region, then the default.
    region = (
        _pick("BEDROCK_REGION", cfg, "bedrock_region")
        or os.getenv("AWS_REGION")
        or DEFAULT_REGION
    )

    timeout = _pick("BEDROCK_TIMEOUT_S", cfg, "timeout_s")
    try:
        timeout_s = float(timeout) if timeout is not None else DEFAULT_TIMEOUT_S
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid BEDROCK_TIMEOUT_S: {timeout!r}") from e

    return Settings(
        model_id=str(model_id),
        region=str(region),
        api_key=_pick("AWS_BEARER_TOKEN_BEDROCK", cfg, "api_key"),
        endpoint_url=_pick("BEDROCK_ENDPOINT_URL", cfg, "endpoint_url"),
        timeout_s=timeout_s,
        log_level=str(_pick("LOG_LEVEL", cfg, "log_level") or "INFO"),
        template_path=_pick("PROMPT_TEMPLATE_PATH", cfg, "template_path"),
    )
