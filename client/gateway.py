"""
client/gateway.py

The single chokepoint for HTTP exchanges with the AfyaJamii service.

Responsibilities
----------------
- Attach the current session token as a bearer credential.
- Encode request bodies and decode response bodies as JSON.
- Translate every failure into one of the typed errors in client.errors:

    no token on an authenticated call  -> Unauthenticated (no I/O performed)
    DNS / connect / read / timeout     -> NetworkError
    HTTP status >= 400                 -> RemoteRejected(detail, status_code)

Each call is attempted exactly once. A hung request is only bounded by the
optional transport timeout; by default there is none.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from client.errors import NetworkError, RemoteRejected, Unauthenticated
from client.schemas import Session

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _error_detail(response: httpx.Response) -> str:
    """
    Pull the ``detail`` message out of an error body.

    FastAPI-style validation errors send ``detail`` as a list of objects with
    a ``msg`` field; those are joined into one line.
    """
    try:
        payload = response.json()
    except ValueError:
        return RemoteRejected.default_message

    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, str) and detail.strip():
        return detail.strip()
    if isinstance(detail, list):
        msgs = [str(item.get("msg")) for item in detail if isinstance(item, dict) and item.get("msg")]
        if msgs:
            return "; ".join(msgs)
    return RemoteRejected.default_message


class Gateway:
    """
    Authenticated JSON-over-HTTP client for the remote service.

    Args:
        base_url:        Service root, e.g. ``https://afyajamii.onrender.com``.
        session:         Session whose token is attached to every call. The
                         gateway only reads it.
        timeout:         Optional transport timeout in seconds.
        transport:       Optional httpx transport (tests use MockTransport).
        on_unauthorized: Called when an authenticated call is answered with
                         HTTP 401, i.e. the server no longer accepts the token.
                         Not called if the session token changed while the
                         request was in flight.
    """

    def __init__(
        self,
        base_url: str,
        session: Session,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.transport = transport
        self.on_unauthorized = on_unauthorized

    def _url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        if not endpoint.startswith(API_PREFIX):
            endpoint = API_PREFIX + endpoint
        return self.base_url + endpoint

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        *,
        auth: bool = True,
        params: Optional[dict[str, Any]] = None,
        report_unauthorized: bool = True,
    ) -> Any:
        """
        Perform one request and return the decoded JSON body (``None`` if empty).

        Args:
            endpoint: Path relative to ``/api/v1`` (the prefix is optional).
            method:   HTTP verb.
            body:     JSON-serialisable request body.
            auth:     Whether the endpoint requires the bearer token.  When
                      ``True`` and no token is present the call fails fast.
            params:   Query string parameters.
            report_unauthorized: Fire ``on_unauthorized`` on HTTP 401.

        Raises:
            Unauthenticated, NetworkError, RemoteRejected
        """
        token = self.session.token
        if auth and token is None:
            logger.info("Refusing %s %s: no session token", method, endpoint)
            raise Unauthenticated()

        headers = {"Accept": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        url = self._url(endpoint)
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    json=body,
                    params=params,
                )
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, endpoint)
            raise NetworkError("The request timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc.__class__.__name__)
            raise NetworkError() from exc

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.info("%s %s -> HTTP %d: %s", method, endpoint, response.status_code, detail)
            if (
                response.status_code == 401
                and auth
                and report_unauthorized
                and self.on_unauthorized is not None
                and self.session.token == token
            ):
                self.on_unauthorized()
            raise RemoteRejected(detail, status_code=response.status_code)

        logger.debug("%s %s -> HTTP %d", method, endpoint, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteRejected("Unexpected response from server", status_code=response.status_code) from exc
