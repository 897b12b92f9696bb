"""Runtime configuration loaded from environment variables."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BANK_MODE_HTTP = "http"
BANK_MODE_SIMULATOR = "simulator"


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class GatewaySettings:
    """Settings for the gateway server and its acquiring bank connection."""
    bank_base_url: str = "http://localhost:8080"
    bank_timeout_seconds: float = 10.0
    bank_mode: str = BANK_MODE_HTTP
    host: str = "0.0.0.0"
    port: int = 8090
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GatewaySettings":
        """Build settings from the environment.

        Raises:
            ValueError: If a numeric variable cannot be parsed or the bank mode
                is unknown.
        """
        env = os.environ if env is None else env
        bank_mode = env.get("BANK_MODE", BANK_MODE_HTTP).lower()
        if bank_mode not in (BANK_MODE_HTTP, BANK_MODE_SIMULATOR):
            raise ValueError(
                f"BANK_MODE must be '{BANK_MODE_HTTP}' or '{BANK_MODE_SIMULATOR}', got {bank_mode!r}"
            )
        return cls(
            bank_base_url=env.get("BANK_BASE_URL", cls.bank_base_url),
            bank_timeout_seconds=_get_float(env, "BANK_TIMEOUT_SECONDS", cls.bank_timeout_seconds),
            bank_mode=bank_mode,
            host=env.get("GATEWAY_HOST", cls.host),
            port=_get_int(env, "GATEWAY_PORT", cls.port),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
        )
