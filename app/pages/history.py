"""
app/pages/history.py

Health history: vitals assessments and conversations, each in its own tab
with its own refresh button.
"""

from __future__ import annotations

import streamlit as st

from app.renderers import render_conversation_record, render_vitals_record
from app.state import history_controller, run
from app.ui import card_close, card_open
from flows.history import HistoryFeed, LoadState


def _feed_status(feed: HistoryFeed, empty_text: str) -> bool:
    """Render loading/error/empty states; return True when records should be listed."""
    if feed.state is LoadState.loading:
        st.info("Loading...")
        return False
    if feed.state is LoadState.failed:
        st.error(feed.error or "Failed to load history")
    if feed.is_empty:
        st.caption(empty_text)
        return False
    return bool(feed.records)


def render() -> None:
    ctl = history_controller()

    card_open("Health History", "View your previous health assessments and conversations")
    card_close()

    tab_vitals, tab_chat = st.tabs(
        [f"Vitals Records ({len(ctl.vitals.records)})", f"Conversations ({len(ctl.conversations.records)})"]
    )

    with tab_vitals:
        if st.button("Refresh", key="refresh_vitals", disabled=ctl.vitals.is_loading):
            run(ctl.refresh_vitals())
            st.rerun()
        if _feed_status(ctl.vitals, "No vitals records yet. Submit your first vitals to see them here."):
            for record in ctl.vitals.records:
                render_vitals_record(record)

    with tab_chat:
        if st.button("Refresh", key="refresh_conversations", disabled=ctl.conversations.is_loading):
            run(ctl.refresh_conversations())
            st.rerun()
        if _feed_status(ctl.conversations, "No conversations yet. Start chatting with the AI assistant."):
            for record in ctl.conversations.records:
                render_conversation_record(record)
