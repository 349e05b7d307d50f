from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx

from client.schemas import MessageOrigin
from flows.chat import FALLBACK_REPLY, WELCOME_ID, ChatController
from flows.notifications import Severity


def test_seeded_with_welcome_using_display_name(signed_in, notes):
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    assert len(ctl.messages) == 1
    welcome = ctl.messages[0]
    assert welcome.id == WELCOME_ID
    assert welcome.origin is MessageOrigin.assistant
    assert welcome.text.startswith("Hello Alice A!")


def test_blank_input_is_ignored(signed_in, service, notes):
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    for text in ("", "   ", "\n\t"):
        assert asyncio.run(ctl.send(text)) is None

    assert len(ctl.messages) == 1
    assert service.calls == []


def test_successful_send_appends_question_and_reply(signed_in, service, notes):
    service.on(
        "POST",
        "/api/v1/chat/advice",
        body={"advice": "Stay hydrated.", "timestamp": "2026-03-01T10:15:00Z"},
    )
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    reply = asyncio.run(ctl.send("  Is swelling normal?  "))

    user_msg, assistant_msg = ctl.messages[1:]
    assert user_msg.origin is MessageOrigin.user
    assert user_msg.text == "Is swelling normal?"
    assert assistant_msg == reply
    assert assistant_msg.text == "Stay hydrated."
    assert assistant_msg.timestamp == datetime(2026, 3, 1, 10, 15, tzinfo=timezone.utc)
    assert service.body_of(0) == {"question": "Is swelling normal?"}
    assert ctl.is_sending is False
    assert len(notes) == 0


def test_failed_send_appends_fallback_and_keeps_question(signed_in, service, notes):
    service.on("POST", "/api/v1/chat/advice", status=404, body={"detail": "No vitals found for user"})
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    asyncio.run(ctl.send("What should I eat?"))

    assert len(ctl.messages) == 3
    assert ctl.messages[1].text == "What should I eat?"
    assert ctl.messages[1].origin is MessageOrigin.user
    assert ctl.messages[2].text == FALLBACK_REPLY
    assert ctl.messages[2].origin is MessageOrigin.assistant
    assert ctl.error == "No vitals found for user"
    assert notes.items[-1].title == "Chat Error"
    assert notes.items[-1].severity is Severity.error


def test_message_ids_are_unique(signed_in, service, notes):
    service.on("POST", "/api/v1/chat/advice", body={"advice": "ok", "timestamp": "not a date"})
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    asyncio.run(ctl.send("one"))
    asyncio.run(ctl.send("two"))

    ids = [m.id for m in ctl.messages]
    assert len(ids) == len(set(ids)) == 5


def test_second_send_refused_while_reply_outstanding(signed_in, service, notes):
    ctl = ChatController(signed_in.session, signed_in.gateway, notes)

    async def scenario():
        release = asyncio.Event()
        entered = asyncio.Event()

        async def handler(request):
            entered.set()
            await release.wait()
            return httpx.Response(200, json={"advice": "first answer"})

        signed_in.gateway.transport = httpx.MockTransport(handler)
        first = asyncio.create_task(ctl.send("first"))
        await entered.wait()
        assert ctl.is_sending
        second = await ctl.send("second")
        release.set()
        await first
        return second

    assert asyncio.run(scenario()) is None
    assert [m.text for m in ctl.messages[1:]] == ["first", "first answer"]
