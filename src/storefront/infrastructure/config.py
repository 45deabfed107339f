"""Runtime settings, read from environment variables.

    STOREFRONT_DATA_DIR       directory holding the JSON data files
    STOREFRONT_ORDER_TIMEOUT  seconds an order placement may take (default 10)
    STOREFRONT_LOG_LEVEL      logging level name (default WARNING)
    STOREFRONT_LOG_FILE       optional log file path
    PAYPAL_CLIENT_ID          public PayPal client id (default "sb", sandbox)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    order_timeout_seconds: float = 10.0
    log_level: str = "WARNING"
    log_file: Path | None = None
    paypal_client_id: str = "sb"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    data_dir = os.getenv("STOREFRONT_DATA_DIR")
    log_file = os.getenv("STOREFRONT_LOG_FILE")
    return Settings(
        data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
        order_timeout_seconds=_float_env("STOREFRONT_ORDER_TIMEOUT", 10.0),
        log_level=os.getenv("STOREFRONT_LOG_LEVEL", "WARNING").upper(),
        log_file=Path(log_file) if log_file else None,
        paypal_client_id=os.getenv("PAYPAL_CLIENT_ID") or "sb",
    )
