from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9000
DEFAULT_VENDOR_ID = 0x4B43
DEFAULT_PRODUCT_ID = 0x3538
DEFAULT_WRITE_TIMEOUT_MS = 5000
# Largest request body the agent will try to decode
MAX_CONTENT_LENGTH = 16 * 1024 * 1024

ENV_PREFIX = "LABELRASTER_"


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    vendor_id: int = DEFAULT_VENDOR_ID
    product_id: int = DEFAULT_PRODUCT_ID
    write_timeout_ms: int = DEFAULT_WRITE_TIMEOUT_MS


def parse_int(value: str, name: str) -> int:
    """Parse a decimal or 0x-prefixed integer setting."""
    try:
        return int(value.strip(), 0)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {value!r}") from exc


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    name = ENV_PREFIX + key
    value = env.get(name)
    if value is None or value == "":
        return default
    return parse_int(value, name)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    if env is None:
        env = os.environ
    settings = Settings(
        host=env.get(ENV_PREFIX + "HOST") or DEFAULT_HOST,
        port=_env_int(env, "PORT", DEFAULT_PORT),
        vendor_id=_env_int(env, "VENDOR_ID", DEFAULT_VENDOR_ID),
        product_id=_env_int(env, "PRODUCT_ID", DEFAULT_PRODUCT_ID),
        write_timeout_ms=_env_int(env, "WRITE_TIMEOUT_MS", DEFAULT_WRITE_TIMEOUT_MS),
    )
    if not 0 < settings.port < 65536:
        raise ValueError(f"Port out of range: {settings.port}")
    for name in ("vendor_id", "product_id"):
        if not 0 <= getattr(settings, name) <= 0xFFFF:
            raise ValueError(f"USB {name.replace('_', ' ')} must fit in 16 bits")
    if settings.write_timeout_ms <= 0:
        raise ValueError("Write timeout must be positive")
    return settings
