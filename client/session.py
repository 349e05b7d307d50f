"""
client/session.py

Session lifecycle: restore on start-up, login, signup, logout.

The SessionManager is the only writer of the Session value.  Everything
else (gateway, flow controllers, pages) holds a reference to the same
Session and reads it.

Login semantics
---------------
1. ``POST /auth/login`` -> ``{access_token}``; a rejection is
   InvalidCredentials, a transport failure NetworkError.
2. The token goes into the session immediately so the next call is
   authenticated.
3. ``GET /auth/me`` fetches the profile.  If that fails for any reason the
   login still succeeds with a placeholder profile
   (``UserProfile.fallback``), flagged ``synthesized=True``.
4. Token and profile are persisted together.

Signup is ``register`` followed by ``login`` with the same credentials, so
its failure surface is SignupRejected plus every login failure.
"""

from __future__ import annotations

import logging
import sqlite3

from pydantic import ValidationError

from client.errors import GatewayError, InvalidCredentials, RemoteRejected, SignupRejected, Unauthenticated
from client.gateway import Gateway
from client.schemas import Session, SignupFields, UserProfile
from storage.credentials import CredentialStore

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, session: Session, store: CredentialStore, gateway: Gateway) -> None:
        self.session = session
        self.store = store
        self.gateway = gateway
        # A 401 on any authenticated call means the server dropped our token.
        self.gateway.on_unauthorized = self.invalidate

    @property
    def is_loading(self) -> bool:
        return self.session.loading

    @property
    def user(self) -> UserProfile | None:
        return self.session.user

    @property
    def token(self) -> str | None:
        return self.session.token

    # -------------------------
    # Start-up
    # -------------------------
    def restore(self) -> Session:
        """
        Hydrate the session from the credential store.

        Only a complete, readable (token, profile) pair is used; anything
        else is discarded and the session starts signed out.  Never raises.
        """
        self.session.loading = True
        try:
            try:
                token, raw_user = self.store.load()
            except (sqlite3.Error, ValueError):
                # ValueError: APP_DATA_KEY is not a valid Fernet key.
                logger.exception("Credential store unreadable; starting signed out")
                token, raw_user = None, None

            user = None
            if token and raw_user:
                try:
                    user = UserProfile.model_validate_json(raw_user)
                except ValidationError:
                    logger.warning("Discarding malformed stored user profile")

            if token and user is not None:
                self.session.token = token
                self.session.user = user
                logger.info("Restored session for user '%s'", user.username)
            else:
                self._clear_memory()
                if token or raw_user:
                    self._clear_store()
        finally:
            self.session.loading = False
        return self.session

    # -------------------------
    # Authentication
    # -------------------------
    async def login(self, username: str, password: str) -> UserProfile:
        """
        Exchange credentials for a token and load the user's profile.

        Raises:
            InvalidCredentials: The service rejected the username/password.
            NetworkError:       The service could not be reached.
            RemoteRejected:     The service answered without a token.
            Unauthenticated:    The session was logged out or replaced before
                                the profile fetch completed.
        """
        try:
            data = await self.gateway.call(
                "/auth/login",
                "POST",
                {"username": username, "password": password},
                auth=False,
            )
        except RemoteRejected as exc:
            logger.info("Login rejected for '%s': %s", username, exc.message)
            raise InvalidCredentials(exc.message) from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise RemoteRejected("Login response did not include an access token")

        self.session.token = token
        self.session.user = None

        user = await self._fetch_profile_or_fallback(username)
        if self.session.token != token:
            # Logged out (or in again) while /auth/me was in flight.
            logger.info("Discarding login for '%s': session changed before it completed", username)
            raise Unauthenticated("Signed out before login completed")
        self.session.user = user
        self.store.save(token, user.model_dump_json())
        logger.info("Logged in as '%s' (account_type=%s)", user.username, user.account_type.value)
        return user

    async def register(self, fields: SignupFields, password: str) -> None:
        """
        Create the account.  Does not sign in; the service returns no token.

        Raises:
            SignupRejected: The service refused the account (e.g. duplicate username).
            NetworkError:   The service could not be reached.
        """
        payload = fields.model_dump(mode="json")
        payload["password"] = password
        try:
            await self.gateway.call("/auth/signup", "POST", payload, auth=False)
        except RemoteRejected as exc:
            logger.info("Signup rejected for '%s': %s", fields.username, exc.message)
            raise SignupRejected(exc.message) from exc
        logger.info("Registered account '%s'", fields.username)

    async def signup(self, fields: SignupFields, password: str) -> UserProfile:
        """``register`` then ``login`` with the same credentials."""
        await self.register(fields, password)
        return await self.login(fields.username, password)

    async def refresh_profile(self) -> UserProfile:
        """
        Re-fetch the profile for the current token, e.g. to replace a
        placeholder created when ``/auth/me`` was unavailable at login.

        Raises:
            Unauthenticated, NetworkError, RemoteRejected
        """
        token = self.session.token
        if token is None:
            raise Unauthenticated()
        data = await self.gateway.call("/auth/me")
        try:
            user = UserProfile.model_validate(data)
        except ValidationError as exc:
            raise RemoteRejected("Unexpected profile response from server") from exc

        if self.session.token != token:
            # Signed out (or in as someone else) while the request was in flight.
            logger.info("Discarding profile refresh for a session that has ended")
            return user
        self.session.user = user
        self.store.save(token, user.model_dump_json())
        return user

    def logout(self) -> None:
        """Forget the session in memory and on disk.  Idempotent, never raises."""
        had_session = self.session.token is not None
        self._clear_memory()
        self._clear_store()
        if had_session:
            logger.info("Logged out")

    def invalidate(self) -> None:
        """The server rejected our token; drop the session as on logout."""
        if self.session.token is not None:
            logger.warning("Session token rejected by server; signing out")
        self.logout()

    # -------------------------
    # Internals
    # -------------------------
    async def _fetch_profile_or_fallback(self, username: str) -> UserProfile:
        try:
            data = await self.gateway.call("/auth/me", report_unauthorized=False)
            return UserProfile.model_validate(data)
        except (GatewayError, ValidationError) as exc:
            # The placeholder carries account_type=general, which the server's
            # risk model treats differently from pregnant/postnatal.
            logger.warning(
                "Profile fetch failed after login for '%s' (%s); using placeholder profile",
                username,
                exc.__class__.__name__,
            )
            return UserProfile.fallback(username)

    def _clear_memory(self) -> None:
        self.session.user = None
        self.session.token = None

    def _clear_store(self) -> None:
        try:
            self.store.clear()
        except sqlite3.Error:
            logger.exception("Could not clear stored credentials")
