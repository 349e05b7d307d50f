"""
client/context.py

Wires one Session, its credential store, the gateway and the session
manager together.  The Streamlit app keeps a single ClientContext per
browser session; tests build one around an httpx.MockTransport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from cryptography.fernet import Fernet

from client.gateway import Gateway
from client.schemas import Session
from client.session import SessionManager
from client.settings import Settings
from storage.credentials import CredentialStore

logger = logging.getLogger(__name__)


@dataclass
class ClientContext:
    settings: Settings
    session: Session
    store: CredentialStore
    gateway: Gateway
    sessions: SessionManager


def build_context(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    fernet: Optional[Fernet] = None,
) -> ClientContext:
    settings = settings or Settings.from_env()
    session = Session()
    store = CredentialStore(settings.store_path, fernet=fernet)
    gateway = Gateway(
        settings.api_base_url,
        session,
        timeout=settings.http_timeout,
        transport=transport,
    )
    sessions = SessionManager(session, store, gateway)
    logger.debug("Client context built for %s", settings.api_base_url)
    return ClientContext(settings, session, store, gateway, sessions)
