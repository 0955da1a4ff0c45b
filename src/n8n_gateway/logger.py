from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "n8n_gateway"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "n8n-gateway.log"

# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


@dataclass(frozen=True)
class LoggingConfig:
    level: int = logging.INFO
    enable_file_logging: bool = False
    log_dir: str = DEFAULT_LOG_DIR


def _render_extra(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, indent=2, default=str)
    text = str(value)
    return text if len(text) <= 200 else f"{text[:200]}..."


class DetailedTextFormatter(logging.Formatter):
    """Multi-line formatter for the file log; renders extra= fields below the message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        component = record.name.rsplit(".", 1)[-1]
        lines = [f"{timestamp} | {record.levelname:7s} | {component:18s} | {record.getMessage()}"]

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            lines.append(f"  {key}: {_render_extra(value)}")

        if record.exc_info:
            lines.append("  traceback:")
            lines.extend("    " + line for line in "".join(traceback.format_exception(*record.exc_info)).splitlines())

        lines.append("")
        return "\n".join(lines)


def get_logger(name: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name or LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Install handlers on the package logger.

    Console output always goes to stderr: with the stdio transport, stdout
    carries the MCP protocol stream.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(config.level)
    logger.propagate = False

    if config.enable_file_logging:
        log_file = Path(config.log_dir) / DEFAULT_LOG_FILE
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a")
            file_handler.setLevel(config.level)
            file_handler.setFormatter(DetailedTextFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            sys.stderr.write(f"Warning: could not open log file {log_file}: {e}\n")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(config.level)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(console)
