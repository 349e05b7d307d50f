"""
flows/history.py

Read-only history of past vitals assessments and assistant conversations.

Each list is an independent feed:

    idle --refresh--> loading +-> loaded (records replaced wholesale)
                              `-> failed (previous records kept, error set)

Both feeds are fetched concurrently when the controller is opened; one
failing has no effect on the other.  Every refresh asks for the same
fixed window of most-recent records; no paging cursor is kept.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

from client.errors import GatewayError, RemoteRejected
from client.gateway import Gateway
from client.schemas import ConversationRecord, Session, VitalsRecord
from flows.notifications import Notifier, Severity

logger = logging.getLogger(__name__)

VITALS_HISTORY_LIMIT = 20
CONVERSATION_HISTORY_LIMIT = 50

RecordT = TypeVar("RecordT", bound=BaseModel)


class LoadState(str, Enum):
    idle = "idle"
    loading = "loading"
    loaded = "loaded"
    failed = "failed"


class HistoryFeed(Generic[RecordT]):
    """One most-recent-N list fetched from a history endpoint."""

    def __init__(
        self,
        endpoint: str,
        limit: int,
        model: Type[RecordT],
        gateway: Gateway,
        notify: Notifier,
        failure_message: str,
    ) -> None:
        self.endpoint = endpoint
        self.limit = limit
        self.model = model
        self.gateway = gateway
        self.notify = notify
        self.failure_message = failure_message
        self.state = LoadState.idle
        self.records: list[RecordT] = []
        self.error = ""

    @property
    def is_loading(self) -> bool:
        return self.state is LoadState.loading

    @property
    def is_empty(self) -> bool:
        """Loaded successfully with no records; not an error."""
        return self.state is LoadState.loaded and not self.records

    async def refresh(self) -> None:
        if self.is_loading:
            logger.debug("%s already loading; ignoring refresh", self.endpoint)
            return

        self.state = LoadState.loading
        self.error = ""
        try:
            data = await self.gateway.call(self.endpoint, params={"limit": self.limit})
            if data is None:
                data = []
            if not isinstance(data, list):
                raise RemoteRejected("Unexpected response from server")
            try:
                records = [self.model.model_validate(item) for item in data]
            except ValidationError as exc:
                raise RemoteRejected("Unexpected response from server") from exc
        except GatewayError as exc:
            self.state = LoadState.failed
            self.error = exc.message
            logger.info("Loading %s failed: %s", self.endpoint, exc.message)
            self.notify("Error", self.failure_message, Severity.error)
            return

        self.records = records
        self.state = LoadState.loaded
        logger.debug("Loaded %d records from %s", len(records), self.endpoint)


class HistoryController:
    def __init__(self, session: Session, gateway: Gateway, notify: Notifier) -> None:
        self.session = session
        self.vitals: HistoryFeed[VitalsRecord] = HistoryFeed(
            "/history/vitals",
            VITALS_HISTORY_LIMIT,
            VitalsRecord,
            gateway,
            notify,
            "Failed to load vitals history",
        )
        self.conversations: HistoryFeed[ConversationRecord] = HistoryFeed(
            "/history/conversations",
            CONVERSATION_HISTORY_LIMIT,
            ConversationRecord,
            gateway,
            notify,
            "Failed to load conversation history",
        )

    @classmethod
    async def open(cls, session: Session, gateway: Gateway, notify: Notifier) -> "HistoryController":
        """Create the controller and fetch both feeds."""
        controller = cls(session, gateway, notify)
        await controller.refresh()
        return controller

    async def refresh(self) -> None:
        await asyncio.gather(self.vitals.refresh(), self.conversations.refresh())

    async def refresh_vitals(self) -> None:
        await self.vitals.refresh()

    async def refresh_conversations(self) -> None:
        await self.conversations.refresh()
