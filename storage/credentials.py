"""
storage/credentials.py

SQLite-backed durable storage for the client's sign-in state.

Schema
------
credentials:  key/value rows; exactly two keys are ever written:

    afyajamii_token   bearer token (opaque string)
    afyajamii_user    serialized UserProfile JSON

Both values are encrypted by storage.crypto before being persisted, and
both rows are written or removed together in a single transaction.

Usage
-----
    from storage.credentials import CredentialStore
    store = CredentialStore(path)
    token, profile_json = store.load()
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from cryptography.fernet import Fernet

from storage.crypto import decrypt_text, encrypt_text

logger = logging.getLogger(__name__)

TOKEN_KEY = "afyajamii_token"
USER_KEY = "afyajamii_user"

_DDL = """
CREATE TABLE IF NOT EXISTS credentials (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,             -- Fernet token from crypto.py
    updated_at TEXT NOT NULL              -- ISO-8601 UTC
);
"""


def _now() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(tz=timezone.utc).isoformat()


class CredentialStore:
    """
    Persistent home of the session token and cached user profile.

    Args:
        path:   SQLite database file; parent directories are created.
        fernet: Cipher for stored values; defaults to the APP_DATA_KEY one.
    """

    def __init__(self, path: Path, fernet: Fernet | None = None) -> None:
        self.path = Path(path)
        self._fernet = fernet
        with self._connect() as conn:
            conn.executescript(_DDL)
        logger.info("Credential store initialised at %s", self.path)

    def _connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row
        return conn

    def load(self) -> tuple[str | None, str | None]:
        """
        Return ``(token, profile_json)``.

        Missing or undecryptable entries come back as ``None``; callers must
        treat a half-present pair as absent.
        """
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key, value FROM credentials WHERE key IN (?, ?)",
                (TOKEN_KEY, USER_KEY),
            ).fetchall()

        values = {row["key"]: decrypt_text(row["value"], self._fernet) for row in rows}
        return values.get(TOKEN_KEY), values.get(USER_KEY)

    def save(self, token: str, profile_json: str) -> None:
        """Persist both entries, replacing whatever was stored before."""
        now = _now()
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO credentials (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                [
                    (TOKEN_KEY, encrypt_text(token, self._fernet), now),
                    (USER_KEY, encrypt_text(profile_json, self._fernet), now),
                ],
            )
        logger.debug("Credentials saved to %s", self.path)

    def clear(self) -> None:
        """Delete both entries. Safe to call when nothing is stored."""
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM credentials WHERE key IN (?, ?)",
                (TOKEN_KEY, USER_KEY),
            )
        logger.debug("Credentials cleared from %s", self.path)
