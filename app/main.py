"""
app/main.py

AfyaJamii AI: Streamlit entry point.
- Restores a saved sign-in once per browser session
- Sign-in page when signed out
- Dashboard (Vitals / Chat / History) when signed in

Run with:  streamlit run app/main.py
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from app.state import drop_controllers, flush_notifications, get_client, run  # noqa: E402
from app.ui import inject_theme  # noqa: E402
from client.errors import GatewayError  # noqa: E402
from flows.display import account_type_label  # noqa: E402

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="AfyaJamii AI",
    page_icon="❤️",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "current_view" not in st.session_state:
    st.session_state["current_view"] = "vitals"


def _import_render(module_name: str):
    mod = __import__(f"app.pages.{module_name}", fromlist=["render"])
    return mod.render


def _logout() -> None:
    get_client().sessions.logout()
    drop_controllers()
    st.session_state["current_view"] = "vitals"
    st.rerun()


inject_theme()
client = get_client()

# ---------------------------------------------------------------------------
# Signed out
# ---------------------------------------------------------------------------
if not client.session.is_authenticated:
    drop_controllers()
    _import_render("auth")()
    flush_notifications()
    st.stop()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
user = client.session.user
st.sidebar.title("❤️ AfyaJamii AI")
st.sidebar.caption("Healthcare Support System")
st.sidebar.divider()

if user is not None:
    st.sidebar.success(f"**{user.display_name}**\n\n{account_type_label(user.account_type)}")
    if user.synthesized:
        st.sidebar.warning("Your profile could not be loaded; care type shown may be wrong.")
        if st.sidebar.button("Reload profile"):
            try:
                run(client.sessions.refresh_profile())
            except GatewayError as exc:
                st.sidebar.error(exc.message)
            else:
                drop_controllers()
                st.rerun()

if st.sidebar.button("↩️ Logout"):
    _logout()

st.sidebar.divider()

nav_options = [
    ("Submit Vitals", "vitals"),
    ("AI Chat", "chat"),
    ("History", "history"),
]
labels = [x[0] for x in nav_options]
keys = [x[1] for x in nav_options]

try:
    current_idx = keys.index(st.session_state["current_view"])
except ValueError:
    current_idx = 0

page_label = st.sidebar.radio("Navigate", options=labels, index=current_idx)
view_key = dict(nav_options)[page_label]
st.session_state["current_view"] = view_key

st.sidebar.divider()
st.sidebar.caption("Not a substitute for professional medical advice.")

# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
st.title(f"Welcome, {user.display_name if user else 'there'}")

if view_key == "vitals":
    _import_render("vitals")()
elif view_key == "chat":
    _import_render("chat")()
elif view_key == "history":
    _import_render("history")()

flush_notifications()
