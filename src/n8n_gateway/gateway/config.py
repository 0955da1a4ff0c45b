from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError

API_PATH = "/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class N8nConfig:
    """Connection settings for one n8n instance."""

    api_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"N8N_API_URL must be an http(s) URL, got {self.api_url!r}")
        if self.timeout <= 0:
            raise ConfigError("N8N_TIMEOUT must be positive")


def normalize_api_url(url: str) -> str:
    """Strip trailing slashes and make sure the URL ends with /api/v1."""
    url = url.strip().rstrip("/")
    if not url.endswith(API_PATH):
        url = f"{url}{API_PATH}"
    return url


def load_config(environ: Mapping[str, str] | None = None) -> N8nConfig:
    """Build an N8nConfig from environment variables.

    Reads:
        N8N_API_URL: base URL of the n8n instance (required)
        N8N_API_KEY: API key sent as X-N8N-API-KEY (required)
        N8N_TIMEOUT: request timeout in seconds (default 30)
        N8N_DEBUG: "true"/"1"/"yes" turns on debug logging
    """
    env = os.environ if environ is None else environ

    missing = [name for name in ("N8N_API_URL", "N8N_API_KEY") if not env.get(name, "").strip()]
    if missing:
        raise ConfigError(f"Missing required environment variable: {', '.join(missing)}")

    raw_timeout = env.get("N8N_TIMEOUT", "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        raise ConfigError(f"N8N_TIMEOUT must be a number, got {raw_timeout!r}") from None

    return N8nConfig(
        api_url=normalize_api_url(env["N8N_API_URL"]),
        api_key=env["N8N_API_KEY"].strip(),
        timeout=timeout,
        debug=env.get("N8N_DEBUG", "").strip().lower() in _TRUTHY,
    )
