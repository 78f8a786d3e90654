"""Runtime configuration.

Loads ``.env`` (if present) with python-dotenv, then reads plain
environment variables into immutable settings objects.  Nothing here is
global: the composition root builds a ``Settings`` once and passes the
relevant parts into constructors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Project root when installed in editable mode (src/quikprint/infrastructure -> root)
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_PAYSTACK_URL = "https://api.paystack.co"


class ConfigurationError(ValueError):
    """An environment setting is present but unusable."""


def _clean_env(value: str | None) -> str:
    """Strip whitespace and stray quotes pasted along with a value."""
    return (value or "").strip().strip("'").strip('"')


def _env_float(name: str, default: float) -> float:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GatewaySettings:
    secret_key: str = ""
    base_url: str = DEFAULT_PAYSTACK_URL
    callback_url: str = "http://localhost:5173/checkout/callback"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _PROJECT_ROOT / "data"
    currency: str = "NGN"
    strict_transitions: bool = False
    log_level: str = "INFO"
    gateway: GatewaySettings = field(default_factory=GatewaySettings)

    @staticmethod
    def from_env(env_file: Path | None = None) -> Settings:
        load_dotenv(dotenv_path=env_file or _PROJECT_ROOT / ".env")

        data_dir = _clean_env(os.getenv("QUIKPRINT_DATA_DIR"))
        base_url = _clean_env(os.getenv("PAYSTACK_BASE_URL")) or DEFAULT_PAYSTACK_URL

        return Settings(
            data_dir=Path(data_dir) if data_dir else _PROJECT_ROOT / "data",
            currency=_clean_env(os.getenv("QUIKPRINT_CURRENCY")) or "NGN",
            strict_transitions=_env_bool("QUIKPRINT_STRICT_TRANSITIONS"),
            log_level=(_clean_env(os.getenv("QUIKPRINT_LOG_LEVEL")) or "INFO").upper(),
            gateway=GatewaySettings(
                secret_key=_clean_env(os.getenv("PAYSTACK_SECRET_KEY")),
                base_url=base_url.rstrip("/"),
                callback_url=_clean_env(os.getenv("PAYSTACK_CALLBACK_URL"))
                or GatewaySettings.callback_url,
                timeout_seconds=_env_float("PAYSTACK_TIMEOUT_SECONDS", GatewaySettings.timeout_seconds),
            ),
        )
