"""
flows/vitals.py

Vitals submission: form -> bounds check -> POST /vitals/submit -> risk result.

    idle --submit--> submitting +-> settled (result stored, form reset)
                                `-> failed  (form kept as entered)

A bounds failure is caught before any network call; the controller stays
``idle`` and exposes the message in ``error``.  The next submit always
starts over from ``idle``.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import ValidationError

from client.errors import GatewayError, RemoteRejected
from client.gateway import Gateway
from client.schemas import (
    VITALS_BOUNDS,
    VITALS_LABELS,
    AccountType,
    AssessmentResult,
    Session,
    VitalsForm,
)
from flows.notifications import Notifier, Severity

logger = logging.getLogger(__name__)


class VitalsState(str, Enum):
    idle = "idle"
    submitting = "submitting"
    settled = "settled"
    failed = "failed"


def validation_message(exc: ValidationError) -> str:
    """Turn the first pydantic error into a sentence fit for the form."""
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err.get("loc") else ""
    label = VITALS_LABELS.get(field, field)

    if not field:
        # model-level check (body temperature vs. unit)
        msg = err.get("msg", "Invalid vitals")
        return msg.removeprefix("Value error, ")
    if err.get("input") in (0, None, ""):
        return f"{label} is required"
    if field in VITALS_BOUNDS:
        low, high = VITALS_BOUNDS[field]
        return f"{label} must be between {low:g} and {high:g}"
    return f"{label}: {err.get('msg', 'invalid value')}"


class VitalsController:
    def __init__(self, session: Session, gateway: Gateway, notify: Notifier) -> None:
        self.session = session
        self.gateway = gateway
        self.notify = notify
        self.form = VitalsForm()
        self.state = VitalsState.idle
        self.result: AssessmentResult | None = None
        self.error = ""

    @property
    def is_submitting(self) -> bool:
        return self.state is VitalsState.submitting

    def _account_type(self) -> AccountType:
        user = self.session.user
        if user is None:
            return AccountType.general
        if user.synthesized:
            logger.warning(
                "Submitting vitals with a placeholder profile; account_type defaults to '%s'",
                user.account_type.value,
            )
        return user.account_type

    async def submit(self) -> AssessmentResult | None:
        """Returns the assessment on success, ``None`` otherwise (see ``error``)."""
        if self.is_submitting:
            logger.debug("Vitals submission already in flight; ignoring submit")
            return None

        self.state = VitalsState.idle
        self.error = ""
        try:
            submission = self.form.to_submission()
        except ValidationError as exc:
            self.error = validation_message(exc)
            logger.info("Vitals rejected locally: %s", self.error)
            return None

        self.state = VitalsState.submitting
        try:
            data = await self.gateway.call(
                "/vitals/submit",
                "POST",
                {
                    "vitals": submission.model_dump(mode="json"),
                    "account_type": self._account_type().value,
                },
            )
            try:
                result = AssessmentResult.from_response(data)
            except ValueError as exc:
                raise RemoteRejected("Unexpected response from server") from exc
        except GatewayError as exc:
            self.state = VitalsState.failed
            self.error = exc.message
            self.notify("Submission Failed", exc.message, Severity.error)
            return None

        self.result = result
        self.state = VitalsState.settled
        self.form.reset()
        logger.info("Vitals assessed: risk=%s p=%.2f", result.risk_label.value, result.risk_probability)
        self.notify(
            "Vitals Submitted Successfully!",
            "Your health data has been analyzed. Check the results below.",
            Severity.success,
        )
        return result
