"""
storage/crypto.py

Fernet-based encryption helpers for values kept in the credential store.

Key lifecycle
-------------
The Fernet key is read from the environment variable APP_DATA_KEY.
APP_DATA_KEY must be a URL-safe base64-encoded 32-byte key as produced by
``Fernet.generate_key()``.

If APP_DATA_KEY is not set, a fresh key is generated at process start and
stored in memory only (suitable for local demo / testing). A warning is
emitted so the operator knows a saved session will not survive a process
restart: the next ``restore()`` finds undecryptable entries and starts
signed out.

Public API
----------
get_fernet() -> Fernet
encrypt_text(text, fernet=None) -> str
decrypt_text(token, fernet=None) -> str | None
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Key management
# ---------------------------------------------------------------------------

_ENV_KEY_NAME = "APP_DATA_KEY"


@lru_cache(maxsize=1)
def get_fernet() -> Fernet:
    """
    Return a cached Fernet instance.

    Reads APP_DATA_KEY from the environment.  If absent, generates a
    one-time in-memory key and logs a warning.
    """
    raw_key = os.environ.get(_ENV_KEY_NAME)

    if raw_key:
        key = raw_key.encode()
        logger.debug("Fernet key loaded from environment variable '%s'.", _ENV_KEY_NAME)
    else:
        key = Fernet.generate_key()
        logger.warning(
            "APP_DATA_KEY environment variable is not set. "
            "A temporary in-memory Fernet key has been generated. "
            "Saved sign-ins will NOT be restored after a process restart. "
            "Set APP_DATA_KEY to a stable key to keep users signed in."
        )

    return Fernet(key)


# ---------------------------------------------------------------------------
# Public encryption helpers
# ---------------------------------------------------------------------------


def encrypt_text(text: str, fernet: Fernet | None = None) -> str:
    """
    Encrypt *text* and return a URL-safe base64 Fernet token string,
    suitable for TEXT storage in SQLite.
    """
    f = fernet or get_fernet()
    return f.encrypt(text.encode("utf-8")).decode("utf-8")


def decrypt_text(token: str, fernet: Fernet | None = None) -> str | None:
    """
    Decrypt a token produced by :func:`encrypt_text`.

    Returns:
        The original string, or ``None`` if the token is invalid or was
        encrypted with a different key.  Stored credentials that cannot be
        read are equivalent to no stored credentials.
    """
    f = fernet or get_fernet()
    try:
        plaintext: bytes = f.decrypt(token.encode("utf-8"))
    except InvalidToken:
        logger.warning("Stored credential could not be decrypted (wrong key or corrupted value).")
        return None
    return plaintext.decode("utf-8")
