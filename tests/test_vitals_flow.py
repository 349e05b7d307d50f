from __future__ import annotations

import asyncio
from dataclasses import asdict

from client.schemas import RiskLabel, TemperatureUnit, VitalsForm
from flows.notifications import Severity
from flows.vitals import VitalsController, VitalsState

ASSESSMENT = {
    "ml_output": {"risk_label": "High", "probability": 0.87},
    "llm_advice": {"advice": "Please see a clinician today."},
}


def _fill(form: VitalsForm) -> None:
    form.age = 29
    form.systolic_bp = 150
    form.diastolic_bp = 95
    form.bs = 7.5 * 18
    form.body_temp = 37.2
    form.body_temp_unit = TemperatureUnit.celsius
    form.heart_rate = 88
    form.patient_history = "  gestational diabetes  "


def test_successful_submit_resets_form_and_stores_result(signed_in, service, notes):
    service.on("POST", "/api/v1/vitals/submit", body=ASSESSMENT)
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)

    result = asyncio.run(ctl.submit())

    assert result.risk_label is RiskLabel.high
    assert result.risk_probability == 0.87
    assert result.advisory_text == "Please see a clinician today."
    assert ctl.state is VitalsState.settled
    assert ctl.result == result
    assert asdict(ctl.form) == asdict(VitalsForm())

    body = service.body_of(0)
    assert body["account_type"] == "pregnant"
    assert body["vitals"]["age"] == 29
    assert body["vitals"]["body_temp_unit"] == "celsius"
    assert body["vitals"]["patient_history"] == "gestational diabetes"

    assert [n.severity for n in notes.items] == [Severity.success]


def test_failed_submit_keeps_every_field(signed_in, service, notes):
    service.on("POST", "/api/v1/vitals/submit", status=500, body={"detail": "Model unavailable"})
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)
    before = asdict(ctl.form)

    assert asyncio.run(ctl.submit()) is None

    assert asdict(ctl.form) == before
    assert ctl.state is VitalsState.failed
    assert ctl.error == "Model unavailable"
    assert notes.items[-1].title == "Submission Failed"
    assert notes.items[-1].severity is Severity.error


def test_out_of_bounds_age_never_reaches_network(signed_in, service, notes):
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)
    ctl.form.age = 150

    assert asyncio.run(ctl.submit()) is None

    assert ctl.state is VitalsState.idle
    assert ctl.error == "Age (years) must be between 1 and 120"
    assert service.calls == []
    assert len(notes) == 0


def test_untouched_form_reports_required_field(signed_in, service, notes):
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)

    asyncio.run(ctl.submit())

    assert ctl.error.endswith("is required")
    assert service.calls == []


def test_temperature_bounds_follow_unit(signed_in, service, notes):
    service.on("POST", "/api/v1/vitals/submit", body=ASSESSMENT)
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)
    ctl.form.body_temp = 98.6

    asyncio.run(ctl.submit())
    assert "Body Temperature must be between 30 and 45" in ctl.error
    assert service.calls == []

    ctl.form.body_temp_unit = TemperatureUnit.fahrenheit
    asyncio.run(ctl.submit())
    assert ctl.state is VitalsState.settled


def test_failure_then_retry_starts_from_idle(signed_in, service, notes):
    service.on("POST", "/api/v1/vitals/submit", status=503, body={"detail": "busy"})
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)
    asyncio.run(ctl.submit())
    assert ctl.state is VitalsState.failed

    service.on("POST", "/api/v1/vitals/submit", body=ASSESSMENT)
    asyncio.run(ctl.submit())
    assert ctl.state is VitalsState.settled
    assert ctl.error == ""


def test_unrecognised_risk_label_is_unknown(signed_in, service, notes):
    service.on("POST", "/api/v1/vitals/submit", body={"ml_output": {"risk_label": "mid", "probability": 0.5}})
    ctl = VitalsController(signed_in.session, signed_in.gateway, notes)
    _fill(ctl.form)

    result = asyncio.run(ctl.submit())

    assert result.risk_label is RiskLabel.unknown
    assert result.advisory_text is None


def test_signed_out_submit_is_unauthenticated(ctx, service, notes):
    ctl = VitalsController(ctx.session, ctx.gateway, notes)
    _fill(ctl.form)

    asyncio.run(ctl.submit())

    assert ctl.state is VitalsState.failed
    assert ctl.error == "You are not signed in"
    assert service.calls == []
