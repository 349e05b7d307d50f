"""
client/settings.py

Runtime configuration for the AfyaJamii client.

Everything is read from environment variables; the defaults point at the
hosted service and a local SQLite file under ./data.

    AFYA_API_BASE_URL   remote service root
    AFYA_STORE_PATH     credential store location
    AFYA_HTTP_TIMEOUT   optional transport timeout (seconds); unset = none
    APP_DATA_KEY        Fernet key for stored credentials (see storage/crypto.py)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_API_BASE_URL = "https://afyajamii.onrender.com"
DEFAULT_STORE_PATH: Path = _PROJECT_ROOT / "data" / "afyajamii_client.db"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    store_path: Path = DEFAULT_STORE_PATH
    http_timeout: float | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        timeout: float | None = None
        raw_timeout = os.environ.get("AFYA_HTTP_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Ignoring non-numeric AFYA_HTTP_TIMEOUT=%r", raw_timeout)

        store_path = os.environ.get("AFYA_STORE_PATH")
        return cls(
            api_base_url=os.environ.get("AFYA_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            store_path=Path(store_path) if store_path else DEFAULT_STORE_PATH,
            http_timeout=timeout,
        )
