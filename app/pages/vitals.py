"""
app/pages/vitals.py

Vitals form + latest assessment.
Widget values are copied into the controller's VitalsForm before submit and
read back from it afterwards, so a successful submit shows zeroed fields and
a failed one keeps what was typed.
"""

from __future__ import annotations

import streamlit as st

from app.renderers import render_assessment
from app.state import run, vitals_controller
from app.ui import card_close, card_open
from client.schemas import TEMPERATURE_BOUNDS, VITALS_BOUNDS, VITALS_LABELS, TemperatureUnit


def _number(field: str, disabled: bool, step: float = 1) -> float:
    low, high = VITALS_BOUNDS[field]
    # 0 means "not entered"; the bounds check happens in the controller
    return st.number_input(
        f"{VITALS_LABELS[field]}  ({low:g}–{high:g})",
        min_value=0.0 if isinstance(step, float) else 0,
        step=step,
        disabled=disabled,
        key=f"vitals_{field}",
    )


def _sync_widgets_from_form() -> None:
    form = vitals_controller().form
    for name in ("age", "systolic_bp", "diastolic_bp", "heart_rate"):
        st.session_state[f"vitals_{name}"] = int(getattr(form, name))
    st.session_state["vitals_bs"] = float(form.bs)
    st.session_state["vitals_body_temp"] = float(form.body_temp)
    st.session_state["vitals_body_temp_unit"] = form.body_temp_unit
    st.session_state["vitals_patient_history"] = form.patient_history


def render() -> None:
    ctl = vitals_controller()
    form = ctl.form
    busy = ctl.is_submitting

    if st.session_state.pop("vitals_sync", False) or "vitals_age" not in st.session_state:
        _sync_widgets_from_form()

    card_open("Submit Health Vitals", "Enter your current health measurements for AI analysis and personalized recommendations")
    card_close()

    c1, c2 = st.columns(2)
    with c1:
        form.age = _number("age", busy)
        form.systolic_bp = _number("systolic_bp", busy)
        form.bs = _number("bs", busy, step=0.1)
    with c2:
        form.heart_rate = _number("heart_rate", busy)
        form.diastolic_bp = _number("diastolic_bp", busy)
        t1, t2 = st.columns([3, 1])
        with t2:
            form.body_temp_unit = st.selectbox(
                "Unit",
                options=list(TemperatureUnit),
                format_func=lambda u: "°C" if u is TemperatureUnit.celsius else "°F",
                disabled=busy,
                key="vitals_body_temp_unit",
            )
        with t1:
            low, high = TEMPERATURE_BOUNDS[form.body_temp_unit]
            form.body_temp = st.number_input(
                f"{VITALS_LABELS['body_temp']}  ({low:g}–{high:g})",
                min_value=0.0,
                step=0.1,
                disabled=busy,
                key="vitals_body_temp",
            )

    form.patient_history = st.text_area(
        "Medical History (Optional)",
        placeholder="Any relevant medical history, current symptoms, or concerns...",
        disabled=busy,
        key="vitals_patient_history",
    )

    if st.button("Submit Vitals for Analysis", type="primary", use_container_width=True, disabled=busy):
        with st.spinner("Analyzing Health Data..."):
            result = run(ctl.submit())
        if result is not None:
            st.session_state["vitals_sync"] = True
            st.rerun()

    if ctl.error:
        st.error(ctl.error)

    if ctl.result is not None:
        render_assessment(ctl.result)
