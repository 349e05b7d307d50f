# app/renderers.py
from __future__ import annotations

from datetime import datetime

import streamlit as st

from app.ui import card_close, card_open, esc, metric_card, risk_badge
from client.schemas import AssessmentResult, ChatMessage, ConversationRecord, VitalsRecord
from flows.display import format_probability


def fmt_when(iso_str: str) -> str:
    try:
        dt = datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return iso_str or "—"
    return dt.strftime("%d %b %Y · %H:%M")


def render_assessment(result: AssessmentResult) -> None:
    """Risk level + confidence, then the assistant's advice if any."""
    card_open("Health Analysis Results", "AI-powered assessment based on your vitals")
    st.markdown(
        f"""
<div style="display:flex; gap:10px; align-items:center; margin-top:8px;">
  <span>Risk Level:</span>
  {risk_badge(result.risk_label)}
  <span style="color:rgba(15,23,42,0.55);">({format_probability(result.risk_probability)} confidence)</span>
</div>
        """,
        unsafe_allow_html=True,
    )
    card_close()

    if result.advisory_text:
        card_open("AI Healthcare Recommendations")
        st.markdown(result.advisory_text)
        card_close()


def render_chat_message(message: ChatMessage) -> None:
    side = "user" if message.is_user else "assistant"
    st.markdown(
        f"""
<div class="chat-row {side}">
  <div>
    <div class="chat-bubble">{esc(message.text)}</div>
    <div class="chat-time">{message.timestamp.astimezone().strftime("%H:%M:%S")}</div>
  </div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_vitals_record(record: VitalsRecord) -> None:
    unit = "°F" if record.body_temp_unit == "fahrenheit" else "°C"
    card_open(fmt_when(record.created_at))
    st.markdown(
        f'{risk_badge(record.ml_risk_label)} '
        f'<span style="color:rgba(15,23,42,0.55);">{format_probability(record.ml_probability)}</span>',
        unsafe_allow_html=True,
    )
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        metric_card("Blood Pressure", f"{record.systolic_bp:g}/{record.diastolic_bp:g}" if record.systolic_bp and record.diastolic_bp else "—", "mmHg")
    with c2:
        metric_card("Heart Rate", f"{record.heart_rate:g}" if record.heart_rate else "—", "BPM")
    with c3:
        metric_card("Temperature", f"{record.body_temp:g}{unit}" if record.body_temp else "—")
    with c4:
        metric_card("Blood Sugar", f"{record.bs:g}" if record.bs else "—", "mg/dL")
    if record.patient_history:
        st.caption(record.patient_history)
    card_close()


def render_conversation_record(record: ConversationRecord) -> None:
    card_open(fmt_when(record.created_at))
    st.markdown(f"**You:** {record.user_message}")
    st.markdown(f"**Assistant:** {record.ai_response}")
    card_close()
