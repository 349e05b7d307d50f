"""
app/state.py

Per-browser-session objects kept in ``st.session_state``:

    client        ClientContext (session, store, gateway, session manager)
    notifications NotificationLog drained into st.toast each rerun
    *_ctl / *_flow controllers, created lazily and dropped on sign-out
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, TypeVar

import streamlit as st

from client.context import ClientContext, build_context
from flows.auth import LoginFlow, SignupFlow
from flows.chat import ChatController
from flows.history import HistoryController
from flows.notifications import NotificationLog, Severity
from flows.vitals import VitalsController

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONTROLLER_KEYS = ("vitals_ctl", "chat_ctl", "history_ctl")

_TOAST_ICONS = {
    Severity.info: "ℹ️",
    Severity.success: "✅",
    Severity.error: "⚠️",
}


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive one controller coroutine to completion from a Streamlit callback."""
    return asyncio.run(coro)


def get_client() -> ClientContext:
    if "client" not in st.session_state:
        ctx = build_context()
        ctx.sessions.restore()
        st.session_state["client"] = ctx
    return st.session_state["client"]


def get_notifier() -> NotificationLog:
    if "notifications" not in st.session_state:
        st.session_state["notifications"] = NotificationLog()
    return st.session_state["notifications"]


def flush_notifications() -> None:
    for note in get_notifier().drain():
        st.toast(f"**{note.title}**\n\n{note.message}", icon=_TOAST_ICONS[note.severity])


def login_flow() -> LoginFlow:
    if "login_flow" not in st.session_state:
        st.session_state["login_flow"] = LoginFlow(get_client().sessions, get_notifier())
    return st.session_state["login_flow"]


def signup_flow() -> SignupFlow:
    if "signup_flow" not in st.session_state:
        st.session_state["signup_flow"] = SignupFlow(get_client().sessions, get_notifier())
    return st.session_state["signup_flow"]


def vitals_controller() -> VitalsController:
    if "vitals_ctl" not in st.session_state:
        ctx = get_client()
        st.session_state["vitals_ctl"] = VitalsController(ctx.session, ctx.gateway, get_notifier())
    return st.session_state["vitals_ctl"]


def chat_controller() -> ChatController:
    if "chat_ctl" not in st.session_state:
        ctx = get_client()
        st.session_state["chat_ctl"] = ChatController(ctx.session, ctx.gateway, get_notifier())
    return st.session_state["chat_ctl"]


def history_controller() -> HistoryController:
    if "history_ctl" not in st.session_state:
        ctx = get_client()
        st.session_state["history_ctl"] = run(
            HistoryController.open(ctx.session, ctx.gateway, get_notifier())
        )
    return st.session_state["history_ctl"]


def drop_controllers() -> None:
    """Forget everything tied to the signed-in user."""
    for key in _CONTROLLER_KEYS:
        st.session_state.pop(key, None)
