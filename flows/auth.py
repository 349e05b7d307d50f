"""
flows/auth.py

Sign-in and sign-up form controllers.

Both validate locally first (missing fields, password confirmation,
minimum length); a local failure never reaches the network.  While a
request is outstanding ``is_loading`` is true and further submits are
refused, which is what the pages use to disable the buttons.
"""

from __future__ import annotations

import logging

from client.errors import GatewayError, LocalValidationError
from client.schemas import AccountType, SignupFields, UserProfile
from client.session import SessionManager
from flows.notifications import Notifier, Severity

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

MSG_MISSING_FIELDS = "Please fill in all fields"
MSG_PASSWORD_MISMATCH = "Passwords do not match"
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
MSG_UNKNOWN_ACCOUNT_TYPE = "Please choose a care type"


class LoginFlow:
    def __init__(self, sessions: SessionManager, notify: Notifier) -> None:
        self.sessions = sessions
        self.notify = notify
        self.is_loading = False
        self.error = ""

    async def submit(self, username: str, password: str) -> UserProfile | None:
        """Returns the signed-in profile, or ``None`` (see ``error``)."""
        if self.is_loading:
            logger.debug("Login already in flight; ignoring submit")
            return None
        if not username or not password:
            self.error = MSG_MISSING_FIELDS
            return None

        self.error = ""
        self.is_loading = True
        try:
            user = await self.sessions.login(username, password)
        except GatewayError as exc:
            self.error = exc.message
            self.notify("Login Failed", exc.message, Severity.error)
            return None
        finally:
            self.is_loading = False

        self.notify("Welcome back!", "You have successfully logged in.", Severity.success)
        return user


class SignupFlow:
    def __init__(self, sessions: SessionManager, notify: Notifier) -> None:
        self.sessions = sessions
        self.notify = notify
        self.is_loading = False
        self.error = ""

    @staticmethod
    def validate(
        username: str,
        email: str,
        full_name: str,
        account_type: AccountType | str | None,
        password: str,
        confirm_password: str,
    ) -> None:
        """Raise LocalValidationError with the first problem found in the form."""
        if not (username and email and full_name and account_type and password):
            raise LocalValidationError(MSG_MISSING_FIELDS)
        if account_type not in {t.value for t in AccountType}:
            raise LocalValidationError(MSG_UNKNOWN_ACCOUNT_TYPE)
        if password != confirm_password:
            raise LocalValidationError(MSG_PASSWORD_MISMATCH)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise LocalValidationError(MSG_PASSWORD_TOO_SHORT)

    async def submit(
        self,
        username: str,
        email: str,
        full_name: str,
        account_type: AccountType | str | None,
        password: str,
        confirm_password: str,
    ) -> UserProfile | None:
        if self.is_loading:
            logger.debug("Signup already in flight; ignoring submit")
            return None

        try:
            self.validate(username, email, full_name, account_type, password, confirm_password)
        except LocalValidationError as exc:
            self.error = exc.message
            return None

        fields = SignupFields(
            username=username,
            email=email,
            full_name=full_name,
            account_type=AccountType(account_type),
        )

        self.error = ""
        self.is_loading = True
        try:
            user = await self.sessions.signup(fields, password)
        except GatewayError as exc:
            self.error = exc.message
            self.notify("Signup Failed", exc.message, Severity.error)
            return None
        finally:
            self.is_loading = False

        self.notify(
            "Account Created!",
            "Welcome to AfyaJamii AI. You can now start your healthcare journey.",
            Severity.success,
        )
        return user
