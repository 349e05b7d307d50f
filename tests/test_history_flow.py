from __future__ import annotations

import asyncio

import httpx

from flows.history import HistoryController, LoadState

VITALS_ROWS = [
    {
        "id": 2,
        "age": 29,
        "systolic_bp": 150,
        "diastolic_bp": 95,
        "bs": 135,
        "body_temp": 37.2,
        "body_temp_unit": "celsius",
        "heart_rate": 88,
        "ml_risk_label": "high",
        "ml_probability": 0.87,
        "created_at": "2026-03-01T10:00:00",
    },
    {
        "id": 1,
        "age": 29,
        "systolic_bp": 118,
        "diastolic_bp": 76,
        "bs": 95,
        "body_temp": 36.8,
        "body_temp_unit": "celsius",
        "heart_rate": 72,
        "patient_history": "none",
        "ml_risk_label": "low",
        "ml_probability": 0.12,
        "created_at": "2026-02-01T10:00:00",
    },
]

CONVERSATION_ROWS = [
    {"id": 5, "user_message": "Is swelling normal?", "ai_response": "Mild swelling is common.", "created_at": "2026-03-01T10:05:00"},
]


def _open(ctx, notes) -> HistoryController:
    return asyncio.run(HistoryController.open(ctx.session, ctx.gateway, notes))


def test_open_fetches_both_feeds_with_fixed_windows(signed_in, service, notes):
    service.on("GET", "/api/v1/history/vitals", body=VITALS_ROWS)
    service.on("GET", "/api/v1/history/conversations", body=CONVERSATION_ROWS)

    ctl = _open(signed_in, notes)

    assert ctl.vitals.state is LoadState.loaded
    assert [r.id for r in ctl.vitals.records] == [2, 1]
    assert ctl.conversations.records[0].ai_response == "Mild swelling is common."
    limits = {call.url.path: call.url.params["limit"] for call in service.calls}
    assert limits == {"/api/v1/history/vitals": "20", "/api/v1/history/conversations": "50"}
    assert all(call.headers["Authorization"] == "Bearer tok1" for call in service.calls)


def test_empty_results_are_not_errors(signed_in, service, notes):
    service.on("GET", "/api/v1/history/vitals", body=[])
    service.on("GET", "/api/v1/history/conversations", body=[])

    ctl = _open(signed_in, notes)

    assert ctl.vitals.is_empty and ctl.conversations.is_empty
    assert ctl.vitals.state is LoadState.loaded
    assert ctl.vitals.error == ""
    assert len(notes) == 0


def test_one_feed_failing_leaves_the_other_loaded(signed_in, service, notes):
    service.on("GET", "/api/v1/history/vitals", status=500, body={"detail": "db down"})
    service.on("GET", "/api/v1/history/conversations", body=CONVERSATION_ROWS)

    ctl = _open(signed_in, notes)

    assert ctl.vitals.state is LoadState.failed
    assert ctl.vitals.error == "db down"
    assert ctl.conversations.state is LoadState.loaded
    assert len(ctl.conversations.records) == 1
    assert [n.message for n in notes.items] == ["Failed to load vitals history"]


def test_feeds_are_fetched_concurrently(signed_in, notes):
    async def scenario():
        in_flight: set[str] = set()
        both_seen = asyncio.Event()

        async def handler(request):
            in_flight.add(request.url.path)
            if len(in_flight) == 2:
                both_seen.set()
            await asyncio.wait_for(both_seen.wait(), timeout=2)
            return httpx.Response(200, json=[])

        signed_in.gateway.transport = httpx.MockTransport(handler)
        return await HistoryController.open(signed_in.session, signed_in.gateway, notes)

    ctl = asyncio.run(scenario())
    assert ctl.vitals.state is LoadState.loaded
    assert ctl.conversations.state is LoadState.loaded


def test_refresh_replaces_records_wholesale(signed_in, service, notes):
    service.on("GET", "/api/v1/history/vitals", body=VITALS_ROWS)
    service.on("GET", "/api/v1/history/conversations", body=[])
    ctl = _open(signed_in, notes)

    service.on("GET", "/api/v1/history/vitals", body=VITALS_ROWS[1:])
    asyncio.run(ctl.refresh_vitals())

    assert [r.id for r in ctl.vitals.records] == [1]
    assert ctl.vitals.state is LoadState.loaded


def test_malformed_rows_fail_the_feed(signed_in, service, notes):
    service.on("GET", "/api/v1/history/vitals", body={"items": []})
    service.on("GET", "/api/v1/history/conversations", body=[{"id": "x"}])

    ctl = _open(signed_in, notes)

    assert ctl.vitals.state is LoadState.failed
    assert ctl.conversations.state is LoadState.failed
    assert ctl.conversations.error == "Unexpected response from server"
