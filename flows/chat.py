"""
flows/chat.py

Conversation with the remote health assistant.

The transcript is append-only and starts with a locally generated welcome
message.  ``send`` appends the user's message before the network call
resolves; the call then appends either the assistant's reply or a local
fallback reply.  The user's message is never removed.

One send at a time: while a reply is outstanding further sends are refused
(the page disables the input as well), so replies cannot interleave.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from client.errors import GatewayError, RemoteRejected
from client.gateway import Gateway
from client.schemas import ChatMessage, MessageOrigin, Session
from flows.notifications import Notifier, Severity

logger = logging.getLogger(__name__)

WELCOME_ID = "welcome"

WELCOME_TEMPLATE = (
    "Hello {name}! I'm your AI healthcare assistant. I can help you understand your "
    "health data, provide personalized recommendations, and answer questions about your "
    "wellbeing. How can I assist you today?"
)

FALLBACK_REPLY = (
    "I apologize, but I'm having trouble responding right now. Please make sure you have "
    "submitted your vitals data first, then try asking your question again."
)


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, str):
        try:
            ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            ts = None
        if ts is not None:
            return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)
    return datetime.now(tz=timezone.utc)


class ChatController:
    def __init__(self, session: Session, gateway: Gateway, notify: Notifier) -> None:
        self.session = session
        self.gateway = gateway
        self.notify = notify
        self.is_sending = False
        self.error = ""

        user = session.user
        name = user.display_name if user is not None else "there"
        self._messages: list[ChatMessage] = [
            ChatMessage(
                id=WELCOME_ID,
                text=WELCOME_TEMPLATE.format(name=name),
                origin=MessageOrigin.assistant,
            )
        ]

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def _append(self, text: str, origin: MessageOrigin, timestamp: datetime | None = None) -> ChatMessage:
        msg = ChatMessage(text=text, origin=origin, timestamp=timestamp or datetime.now(tz=timezone.utc))
        self._messages.append(msg)
        return msg

    async def send(self, text: str) -> ChatMessage | None:
        """
        Ask the assistant a question.

        Returns the assistant-side message appended for this send (reply or
        fallback), or ``None`` when nothing was sent.
        """
        question = (text or "").strip()
        if not question:
            return None
        if self.is_sending:
            logger.debug("Chat reply outstanding; refusing new send")
            return None

        self.error = ""
        self._append(question, MessageOrigin.user)
        self.is_sending = True
        try:
            data = await self.gateway.call("/chat/advice", "POST", {"question": question})
            advice = data.get("advice") if isinstance(data, dict) else None
            if not isinstance(advice, str) or not advice.strip():
                raise RemoteRejected("The assistant returned an empty reply")
        except GatewayError as exc:
            self.error = exc.message
            self.notify("Chat Error", exc.message, Severity.error)
            return self._append(FALLBACK_REPLY, MessageOrigin.assistant)
        finally:
            self.is_sending = False

        return self._append(advice, MessageOrigin.assistant, _parse_timestamp(data.get("timestamp")))
