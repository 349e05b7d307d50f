"""
flows/display.py

Small label/tone lookups shared by the pages.
"""

from __future__ import annotations

from client.schemas import AccountType, RiskLabel

_RISK_TONES = {
    RiskLabel.low: "success",
    RiskLabel.medium: "warning",
    RiskLabel.high: "danger",
}

_ACCOUNT_LABELS = {
    AccountType.pregnant: "Pregnancy Care",
    AccountType.postnatal: "Postnatal Care",
    AccountType.general: "General Health",
}

ACCOUNT_DESCRIPTIONS = {
    AccountType.pregnant: "For expecting mothers - specialized pregnancy care and monitoring",
    AccountType.postnatal: "For new mothers - postpartum care and recovery support",
    AccountType.general: "For general healthcare monitoring and wellness tracking",
}


def risk_tone(label: RiskLabel | str | None) -> str:
    """low -> success, medium -> warning, high -> danger, anything else -> primary."""
    if isinstance(label, RiskLabel):
        return _RISK_TONES.get(label, "primary")
    try:
        return _RISK_TONES.get(RiskLabel((label or "").strip().lower()), "primary")
    except ValueError:
        return "primary"


def account_type_label(account_type: AccountType | str | None) -> str:
    try:
        return _ACCOUNT_LABELS[AccountType(account_type)]
    except ValueError:
        return str(account_type or "")


def format_probability(probability: float | None) -> str:
    if probability is None:
        return "—"
    return f"{probability * 100:.1f}%"
