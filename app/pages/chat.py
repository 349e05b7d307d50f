"""
app/pages/chat.py

AI healthcare chat: transcript + input.  The input is disabled while a
reply is outstanding.
"""

from __future__ import annotations

import streamlit as st

from app.renderers import render_chat_message
from app.state import chat_controller, run
from app.ui import card_close, card_open


def render() -> None:
    ctl = chat_controller()

    card_open("AI Healthcare Chat", "Get personalized health advice and ask questions about your wellbeing")
    card_close()

    with st.container(height=460):
        for message in ctl.messages:
            render_chat_message(message)

    if ctl.error:
        st.error(ctl.error)

    question = st.chat_input(
        "Ask about your health, symptoms, or get recommendations...",
        disabled=ctl.is_sending,
    )
    if question:
        with st.spinner("AI is thinking..."):
            run(ctl.send(question))
        st.rerun()

    st.caption("Note: Make sure to submit your vitals first for personalized health advice.")
