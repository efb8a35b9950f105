"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .cache import DEFAULT_TTL_MS

API_BASE_DEFAULT = "http://localhost:3002/api"
API_TIMEOUT_DEFAULT = 10.0
LOG_DIR_DEFAULT = Path("work") / "logs"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for :class:`invoicekit.client.ApiClient`."""

    api_base: str = API_BASE_DEFAULT
    token: str | None = None
    timeout: float = API_TIMEOUT_DEFAULT
    settings_ttl_ms: float = DEFAULT_TTL_MS
    log_dir: Path = LOG_DIR_DEFAULT

    def url(self, endpoint: str) -> str:
        base = self.api_base.rstrip("/")
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{base}{endpoint}"


def _float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def load_config(env: Mapping[str, str] | None = None, **overrides: object) -> ClientConfig:
    """Build a :class:`ClientConfig` from ``env`` (``os.environ`` by default).

    Keyword ``overrides`` with a value other than ``None`` win over the
    environment, which is how the CLI flags are applied.
    """

    source = os.environ if env is None else env
    values: dict[str, object] = {
        "api_base": source.get("INVOICEKIT_API_BASE") or API_BASE_DEFAULT,
        "token": source.get("INVOICEKIT_API_TOKEN") or None,
        "timeout": _float(source.get("INVOICEKIT_TIMEOUT"), API_TIMEOUT_DEFAULT),
        "settings_ttl_ms": _float(source.get("INVOICEKIT_SETTINGS_TTL_MS"), DEFAULT_TTL_MS),
        "log_dir": Path(source.get("INVOICEKIT_LOG_DIR") or LOG_DIR_DEFAULT),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return ClientConfig(**values)  # type: ignore[arg-type]


__all__ = ["API_BASE_DEFAULT", "ClientConfig", "load_config"]
