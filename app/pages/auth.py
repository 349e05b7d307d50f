"""
app/pages/auth.py

Sign-in landing page:
- Left hero panel (raw HTML via components.html)
- Right Sign in / Create account tabs
"""

from __future__ import annotations

import streamlit as st
import streamlit.components.v1 as components

from app.state import drop_controllers, login_flow, run, signup_flow
from app.ui import inject_theme
from client.schemas import AccountType
from flows.display import ACCOUNT_DESCRIPTIONS, account_type_label

_HERO_HTML = """
<div style="
  border-radius: 18px;
  height: 600px;
  padding: 26px 26px;
  background: linear-gradient(145deg, hsl(340 55% 32%), hsl(212 72% 14%));
  border: 1px solid rgba(255,255,255,0.10);
  position: relative;
  overflow: hidden;
  font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif;
">
  <div style="display:flex; align-items:center; gap:12px; margin-bottom:22px;">
    <div style="
      width:46px; height:46px; border-radius:14px;
      background: rgba(255,255,255,0.12);
      display:flex; align-items:center; justify-content:center;
      font-size:22px;
    ">❤️</div>
    <div style="color: rgba(255,255,255,0.95); font-weight:900; font-size:20px;">AfyaJamii AI</div>
  </div>

  <div style="position:absolute; left:26px; bottom:22px; right:26px;">
    <div style="color:white; font-weight:1000; font-size:46px; line-height:1.05; margin-bottom:14px;">
      Maternal care,<br>guided by your vitals.
    </div>
    <div style="color: rgba(255,255,255,0.75); font-size:15px; max-width:520px;">
      Risk assessment from your measurements, answers from an AI health assistant,
      and your full history in one place.
    </div>
  </div>
</div>
"""


def _render_login() -> None:
    flow = login_flow()
    with st.form("login_form"):
        username = st.text_input("Username or Email", disabled=flow.is_loading)
        password = st.text_input("Password", type="password", disabled=flow.is_loading)
        submitted = st.form_submit_button(
            "Sign In", type="primary", use_container_width=True, disabled=flow.is_loading
        )
    if submitted:
        with st.spinner("Signing in..."):
            user = run(flow.submit(username, password))
        if user is not None:
            drop_controllers()
            st.rerun()
    if flow.error:
        st.error(flow.error)


def _render_signup() -> None:
    flow = signup_flow()
    with st.form("signup_form"):
        full_name = st.text_input("Full Name", disabled=flow.is_loading)
        username = st.text_input("Username", disabled=flow.is_loading)
        email = st.text_input("Email", disabled=flow.is_loading)
        account_type = st.selectbox(
            "Account Type",
            options=list(AccountType),
            index=None,
            format_func=account_type_label,
            placeholder="Select your care type",
            disabled=flow.is_loading,
        )
        if account_type is not None:
            st.caption(ACCOUNT_DESCRIPTIONS[account_type])
        password = st.text_input("Password", type="password", disabled=flow.is_loading)
        confirm = st.text_input("Confirm Password", type="password", disabled=flow.is_loading)
        submitted = st.form_submit_button(
            "Create Account", type="primary", use_container_width=True, disabled=flow.is_loading
        )
    if submitted:
        with st.spinner("Creating account..."):
            user = run(flow.submit(username, email, full_name, account_type, password, confirm))
        if user is not None:
            drop_controllers()
            st.rerun()
    if flow.error:
        st.error(flow.error)


def render() -> None:
    inject_theme()

    colL, colR = st.columns([1.15, 1], gap="large")

    with colL:
        # components.html renders raw HTML, no Markdown parsing
        components.html(_HERO_HTML, height=620)

    with colR:
        st.markdown(
            """
<div style="padding: 10px 4px;">
  <div style="font-weight:1000; font-size:34px; color: rgba(15,23,42,0.92);">Welcome</div>
  <div style="margin-top:6px; color: rgba(15,23,42,0.55); font-size:15px;">Sign in or create an account to continue</div>
</div>
            """,
            unsafe_allow_html=True,
        )
        tab_login, tab_signup = st.tabs(["Sign in", "Create account"])
        with tab_login:
            _render_login()
        with tab_signup:
            _render_signup()

        st.markdown(
            """
<p style="color: rgba(15,23,42,0.55); font-size:12px; margin-top:16px;">
Not a substitute for professional medical advice.
</p>
            """,
            unsafe_allow_html=True,
        )
