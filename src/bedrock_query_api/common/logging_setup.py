"""Central logging setup for the project."""
from __future__ import annotations
import logging
import sys

METRICS_LOGGER_NAME = "bedrock_query.metrics"

def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure root logger with sane defaults.

    The per-request metrics logger stays at INFO whatever `level` is, so
    telemetry lines survive LOG_LEVEL=WARNING.

    Args:
        level: Logging level, as an int or a level name such as "DEBUG".
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger(METRICS_LOGGER_NAME).setLevel(logging.INFO)
