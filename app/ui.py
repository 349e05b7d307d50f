# =========================
# app/ui.py
# =========================
from __future__ import annotations

import html
import streamlit as st

from client.schemas import RiskLabel
from flows.display import risk_tone


def inject_theme() -> None:
    st.markdown(
        """
<style>
/* ============================================================
   AfyaJamii theme
   - Light canvas + white cards
   - Maternal rose accent
   - Risk pills (low/medium/high)
   ============================================================ */

[data-testid="stSidebarNav"] { display: none !important; }

:root{
  --primary: 212 72% 20%;
  --accent: 340 65% 47%;           /* maternal */
  --postnatal: 265 50% 50%;
  --general: 177 60% 38%;

  --canvas: #F6F8FB;
  --card: #FFFFFF;
  --border: rgba(15,23,42,0.10);
  --muted: rgba(15,23,42,0.55);
  --text: rgba(15,23,42,0.92);

  --risk-low: 142 70% 33%;
  --risk-low-bg: 142 70% 95%;
  --risk-mod: 38 92% 45%;
  --risk-mod-bg: 38 92% 95%;
  --risk-high: 0 72% 45%;
  --risk-high-bg: 0 72% 95%;
}

.stApp { background: var(--canvas); }

div.block-container {
  padding-top: 2.2rem;
  padding-bottom: 2.2rem;
}

div[data-testid="stTextInput"] input,
div[data-testid="stTextArea"] textarea,
div[data-testid="stNumberInput"] input {
  background: #FFFFFF !important;
  color: var(--text) !important;
  border: 1px solid var(--border) !important;
  border-radius: 12px !important;
}

.stButton>button{ border-radius: 12px; border: 1px solid rgba(15,23,42,0.14); }
.stButton>button[kind="primary"]{
  background: hsl(var(--accent)) !important;
  border: 1px solid hsl(var(--accent)) !important;
  color: white !important;
}

/* Cards */
.mc-card{
  background: var(--card);
  border: 1px solid var(--border);
  border-radius: 16px;
  padding: 16px 16px;
  margin-bottom: 12px;
}
.mc-title{ font-weight: 800; font-size: 16px; margin-bottom: 2px; color: var(--text); }
.mc-sub{ color: var(--muted); font-size: 13px; margin-bottom: 0px; }

.mc-metric-label{ color: var(--muted); font-size: 13px; margin-bottom: 6px; }
.mc-metric-value{ font-size: 24px; font-weight: 900; color: var(--text); line-height: 1.0; }
.mc-metric-foot{ margin-top: 6px; color: var(--muted); font-size: 12px; }

/* Chat bubbles */
.chat-row{ display:flex; margin: 6px 0; }
.chat-row.user{ justify-content:flex-end; }
.chat-bubble{
  max-width: 80%;
  padding: 10px 12px;
  border-radius: 12px;
  white-space: pre-line;
  font-size: 14px;
}
.chat-row.user .chat-bubble{ background: hsla(var(--accent),0.10); }
.chat-row.assistant .chat-bubble{ background: #EEF2F7; }
.chat-time{ color: var(--muted); font-size: 11px; margin-top: 2px; }

/* Pills / badges */
.risk-badge{
  display:inline-block;
  padding: 6px 10px;
  border-radius: 999px;
  font-size: 12px;
  font-weight: 800;
  border: 1px solid rgba(15,23,42,0.08);
}
.risk-success{ background: hsl(var(--risk-low-bg)); color: hsl(var(--risk-low)); }
.risk-warning{ background: hsl(var(--risk-mod-bg)); color: hsl(var(--risk-mod)); }
.risk-danger{ background: hsl(var(--risk-high-bg)); color: hsl(var(--risk-high)); }
.risk-primary{ background: #EEF2F7; color: rgba(15,23,42,0.75); }
</style>
        """,
        unsafe_allow_html=True,
    )


def esc(x: str) -> str:
    """Escape any user/server-provided strings before injecting into HTML."""
    return html.escape(str(x or ""), quote=True)


def card_open(title: str, subtitle: str = "") -> None:
    sub = f'<div class="mc-sub">{esc(subtitle)}</div>' if subtitle else ""
    st.markdown(
        f'<div class="mc-card"><div class="mc-title">{esc(title)}</div>{sub}',
        unsafe_allow_html=True,
    )


def card_close() -> None:
    st.markdown("</div>", unsafe_allow_html=True)


def risk_badge(label: RiskLabel | str | None) -> str:
    tone = risk_tone(label)
    if isinstance(label, RiskLabel):
        text = label.value
    else:
        text = str(label or RiskLabel.unknown.value)
    return f'<span class="risk-badge risk-{tone}">{esc(text.upper())}</span>'


def metric_card(label: str, value: str, foot: str | None = None) -> None:
    """
    Renders plain text only (escaped). Put HTML such as risk_badge outside
    the card with st.markdown(..., unsafe_allow_html=True).
    """
    foot_html = f'<div class="mc-metric-foot">{esc(foot)}</div>' if foot else ""
    st.markdown(
        f"""
<div class="mc-card">
  <div class="mc-metric-label">{esc(label)}</div>
  <div class="mc-metric-value">{esc(value)}</div>
  {foot_html}
</div>
        """,
        unsafe_allow_html=True,
    )
