from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

SERVICE_MODES = ("mock", "http")


def load_env_file(path: Path | None = None) -> None:
    """Load a ``.env`` file (cwd by default) without overriding real env vars."""
    load_dotenv(path or Path.cwd() / ".env", override=False)


def _get_float(name: str, fallback: str) -> float:
    raw = os.getenv(name, fallback)
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid value for {name}: {raw!r}") from None
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0, got {raw!r}")
    return value


def _get_int(name: str, fallback: str) -> int:
    raw = os.getenv(name, fallback)
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Invalid value for {name}: {raw!r}") from None


def _get_optional_positive_int(name: str) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return None
    value = _get_int(name, raw)
    if value <= 0:
        raise RuntimeError(f"{name} must be > 0, got {raw!r}")
    return value


def _get_mode(name: str, fallback: str) -> str:
    value = os.getenv(name, fallback).strip().lower()
    if value not in SERVICE_MODES:
        raise RuntimeError(
            f"{name} must be one of {', '.join(SERVICE_MODES)}, got {value!r}"
        )
    return value


@dataclass(frozen=True)
class Settings:
    services_mode: str = field(
        default_factory=lambda: _get_mode("ORDER_SERVICES_MODE", "mock")
    )
    call_timeout_seconds: float = field(
        default_factory=lambda: _get_float("ORDER_CALL_TIMEOUT_SECONDS", "30")
    )
    dedup_window_seconds: float = field(
        default_factory=lambda: _get_float("ORDER_DEDUP_WINDOW_SECONDS", "300")
    )
    max_fan_out: int | None = field(
        default_factory=lambda: _get_optional_positive_int("ORDER_MAX_FAN_OUT")
    )
    mock_latency_seconds: float = field(
        default_factory=lambda: _get_float("ORDER_MOCK_LATENCY_SECONDS", "0.1")
    )
    inventory_service_url: str = field(
        default_factory=lambda: os.getenv(
            "INVENTORY_SERVICE_URL", "https://inventory-service.com"
        ).rstrip("/")
    )
    payment_service_url: str = field(
        default_factory=lambda: os.getenv(
            "PAYMENT_SERVICE_URL", "https://payment-gateway.com"
        ).rstrip("/")
    )
    email_service_url: str = field(
        default_factory=lambda: os.getenv(
            "EMAIL_SERVICE_URL", "https://email-service.com"
        ).rstrip("/")
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("ORDER_LOG_LEVEL", "INFO").upper()
    )
    host: str = field(default_factory=lambda: os.getenv("ORDER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _get_int("ORDER_PORT", "8000"))


def load_settings() -> Settings:
    load_env_file()
    return Settings()
