from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

from dotenv import load_dotenv

from .ratelimit import DEFAULT_MAX_CALLS, DEFAULT_WINDOW_SECONDS


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Config:
    webhook_url: Optional[str]
    request_timeout_seconds: float
    rate_limit_max_calls: int
    rate_limit_window_seconds: float


def load_config(env_path: Optional[Path] = None) -> Config:
    load_dotenv(env_path)

    return Config(
        webhook_url=_env("DINGROBOT_WEBHOOK_URL"),
        request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", 30.0),
        rate_limit_max_calls=_env_int("RATE_LIMIT_MAX_CALLS", DEFAULT_MAX_CALLS),
        rate_limit_window_seconds=_env_float(
            "RATE_LIMIT_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS
        ),
    )
