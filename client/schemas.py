"""
client/schemas.py

Pydantic v2 data models exchanged between the gateway, the session manager,
the flow controllers and the Streamlit pages.

Wire field names are kept as the remote service spells them
(``systolic_bp``, ``bs``, ``ml_risk_label`` ...) so payloads can be built
with ``model_dump`` and decoded with ``model_validate`` without aliasing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AccountType(str, Enum):
    """Care pathway chosen at signup; drives the risk model on the server."""
    pregnant = "pregnant"
    postnatal = "postnatal"
    general = "general"


class TemperatureUnit(str, Enum):
    celsius = "celsius"
    fahrenheit = "fahrenheit"


class RiskLabel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    unknown = "unknown"


class MessageOrigin(str, Enum):
    user = "user"
    assistant = "assistant"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ---------------------------------------------------------------------------
# Identity / session
# ---------------------------------------------------------------------------


class UserProfile(BaseModel):
    """The signed-in user as returned by ``GET /api/v1/auth/me``."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str = ""
    full_name: str = ""
    account_type: AccountType = AccountType.general
    synthesized: bool = Field(
        default=False,
        description="True when the profile fetch failed and this is a local placeholder.",
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @classmethod
    def fallback(cls, username: str) -> "UserProfile":
        """Minimal stand-in used when the profile endpoint is unavailable after login."""
        return cls(id=0, username=username, synthesized=True)


@dataclass
class Session:
    """
    Current authentication state.

    Owned by exactly one SessionManager; every other component receives the
    same instance and only reads it.
    """
    user: Optional[UserProfile] = None
    token: Optional[str] = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None


# ---------------------------------------------------------------------------
# Vitals
# ---------------------------------------------------------------------------

# Clinically plausible input ranges, inclusive.
VITALS_BOUNDS: dict[str, tuple[float, float]] = {
    "age": (1, 120),
    "systolic_bp": (70, 250),
    "diastolic_bp": (40, 150),
    "bs": (30, 600),
    "heart_rate": (30, 220),
}

TEMPERATURE_BOUNDS: dict[TemperatureUnit, tuple[float, float]] = {
    TemperatureUnit.celsius: (30.0, 45.0),
    TemperatureUnit.fahrenheit: (86.0, 113.0),
}

VITALS_LABELS: dict[str, str] = {
    "age": "Age (years)",
    "systolic_bp": "Systolic BP (mmHg)",
    "diastolic_bp": "Diastolic BP (mmHg)",
    "bs": "Blood Sugar (mg/dL)",
    "body_temp": "Body Temperature",
    "heart_rate": "Heart Rate (BPM)",
}


class VitalsSubmission(BaseModel):
    """One validated set of measurements, ready for ``POST /vitals/submit``."""

    age: int = Field(ge=VITALS_BOUNDS["age"][0], le=VITALS_BOUNDS["age"][1])
    systolic_bp: int = Field(ge=VITALS_BOUNDS["systolic_bp"][0], le=VITALS_BOUNDS["systolic_bp"][1])
    diastolic_bp: int = Field(ge=VITALS_BOUNDS["diastolic_bp"][0], le=VITALS_BOUNDS["diastolic_bp"][1])
    bs: float = Field(ge=VITALS_BOUNDS["bs"][0], le=VITALS_BOUNDS["bs"][1])
    body_temp: float
    body_temp_unit: TemperatureUnit = TemperatureUnit.celsius
    heart_rate: int = Field(ge=VITALS_BOUNDS["heart_rate"][0], le=VITALS_BOUNDS["heart_rate"][1])
    patient_history: Optional[str] = None

    @model_validator(mode="after")
    def _check_temperature(self) -> "VitalsSubmission":
        low, high = TEMPERATURE_BOUNDS[self.body_temp_unit]
        if not low <= self.body_temp <= high:
            unit = "°C" if self.body_temp_unit is TemperatureUnit.celsius else "°F"
            raise ValueError(f"Body Temperature must be between {low:g} and {high:g} {unit}")
        return self


@dataclass
class VitalsForm:
    """Editable form values; zero means "not entered yet"."""
    age: int = 0
    systolic_bp: int = 0
    diastolic_bp: int = 0
    bs: float = 0
    body_temp: float = 0
    body_temp_unit: TemperatureUnit = TemperatureUnit.celsius
    heart_rate: int = 0
    patient_history: str = ""

    def reset(self) -> None:
        fresh = VitalsForm()
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))

    def to_submission(self) -> VitalsSubmission:
        """Raises pydantic.ValidationError when any value is out of bounds."""
        return VitalsSubmission(
            age=self.age,
            systolic_bp=self.systolic_bp,
            diastolic_bp=self.diastolic_bp,
            bs=self.bs,
            body_temp=self.body_temp,
            body_temp_unit=self.body_temp_unit,
            heart_rate=self.heart_rate,
            patient_history=self.patient_history.strip() or None,
        )


class AssessmentResult(BaseModel):
    """Risk model output plus the assistant's advice for one submission."""

    risk_label: RiskLabel = RiskLabel.unknown
    risk_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    advisory_text: Optional[str] = None

    @classmethod
    def from_response(cls, data: Any) -> "AssessmentResult":
        """
        Decode ``{ml_output: {risk_label, probability}, llm_advice: {advice}}``.

        Raises:
            ValueError: If *data* is not an object or the probability is
                outside [0, 1].
        """
        if not isinstance(data, dict):
            raise ValueError("assessment response is not a JSON object")

        ml_output = data.get("ml_output") or {}
        llm_advice = data.get("llm_advice") or {}

        raw_label = str(ml_output.get("risk_label") or "").strip().lower()
        try:
            label = RiskLabel(raw_label)
        except ValueError:
            label = RiskLabel.unknown

        probability = ml_output.get("probability")
        return cls(
            risk_label=label,
            risk_probability=float(probability) if probability is not None else 0.0,
            advisory_text=llm_advice.get("advice") or None,
        )


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str
    origin: MessageOrigin
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def is_user(self) -> bool:
        return self.origin is MessageOrigin.user


# ---------------------------------------------------------------------------
# History (read-only projections)
# ---------------------------------------------------------------------------


class VitalsRecord(BaseModel):
    """A past vitals submission with the risk model's verdict."""

    model_config = ConfigDict(frozen=True)

    id: int
    age: Optional[float] = None
    systolic_bp: Optional[float] = None
    diastolic_bp: Optional[float] = None
    bs: Optional[float] = None
    body_temp: Optional[float] = None
    body_temp_unit: str = TemperatureUnit.celsius.value
    heart_rate: Optional[float] = None
    patient_history: Optional[str] = None
    ml_risk_label: str = RiskLabel.unknown.value
    ml_probability: Optional[float] = None
    created_at: str = Field(description="ISO-8601 timestamp from the server.")


class ConversationRecord(BaseModel):
    """One question/answer exchange with the assistant."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_message: str
    ai_response: str
    created_at: str = Field(description="ISO-8601 timestamp from the server.")


# ---------------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------------


class SignupFields(BaseModel):
    """Profile fields sent to ``POST /api/v1/auth/signup`` alongside the password."""

    username: str
    email: str
    full_name: str
    account_type: AccountType
