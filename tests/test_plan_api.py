from __future__ import annotations

from dataclasses import replace
from datetime import time

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import create_app
from studyplan.controllers.plan_controller import router as plan_router
from studyplan.domain.models import ScheduleBlock
from studyplan.services.plan_service import PlanGenerationService
from studyplan.services.remote_plan_service import MissingCredentialError, TransportFailureError
from studyplan.utils.config import get_settings


SUBJECTS_PAYLOAD = [
    {"name": "Math", "priority": 3, "min_minutes": 30},
    {"name": "History", "priority": 1, "min_minutes": 20},
]

LOCAL_BLOCKS = [
    {"start": "08:00", "end": "08:38", "subject": "Math", "minutes": 38},
    {"start": "08:38", "end": "09:01", "subject": "History", "minutes": 23},
]


class FakeRemoteAdapter:
    def __init__(self, blocks=None, error: Exception | None = None) -> None:
        self._blocks = blocks or []
        self._error = error
        self.calls = 0

    def request_plan(self, *, subjects, total_hours, start_time, focus):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return list(self._blocks)


def _build_client(adapter: FakeRemoteAdapter) -> TestClient:
    settings = replace(get_settings(), openai_api_key=None, default_start_time="08:00")
    service = PlanGenerationService(settings=settings, remote_adapter=adapter)
    return TestClient(create_app(settings=settings, plan_service=service))


def test_local_plan_endpoint():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={
            "total_hours": 1.0,
            "start_time": "08:00",
            "subjects": SUBJECTS_PAYLOAD,
            "use_remote": False,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"mode": "local", "blocks": LOCAL_BLOCKS}


def test_remote_plan_endpoint():
    adapter = FakeRemoteAdapter(
        blocks=[ScheduleBlock(time(8, 0), time(8, 45), "Math", 45)]
    )
    client = _build_client(adapter)

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD, "use_remote": True},
    )

    assert response.status_code == 200
    assert response.json() == {
        "mode": "remote",
        "blocks": [{"start": "08:00", "end": "08:45", "subject": "Math", "minutes": 45}],
    }


def test_remote_failure_is_a_mode_switch_not_an_error():
    adapter = FakeRemoteAdapter(error=TransportFailureError("HTTP 503", status_code=503, body="down"))
    client = _build_client(adapter)

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD, "use_remote": True},
    )

    assert adapter.calls == 1
    assert response.status_code == 200
    assert response.json() == {"mode": "local", "blocks": LOCAL_BLOCKS}


def test_use_ai_flag_is_accepted():
    adapter = FakeRemoteAdapter(error=MissingCredentialError("no key"))
    client = _build_client(adapter)

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD, "use_ai": True},
    )

    assert adapter.calls == 1
    assert response.json()["mode"] == "local"


def test_invalid_start_time_falls_back_to_eight_oclock():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 0.5, "start_time": "after lunch", "subjects": [SUBJECTS_PAYLOAD[0]]},
    )

    assert response.status_code == 200
    assert response.json()["blocks"] == [
        {"start": "08:00", "end": "08:30", "subject": "Math", "minutes": 30}
    ]


def test_blank_focus_is_ignored():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD, "focus": "  "},
    )

    assert response.json()["blocks"] == LOCAL_BLOCKS


def test_focus_shifts_time_toward_subject():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD, "focus": "history"},
    )

    # History priority 1 -> 2: shares round(6.0)=6 and round(4.0)=4.
    assert [block["minutes"] for block in response.json()["blocks"]] == [36, 24]


def test_zero_hours_returns_no_blocks():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 0, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD},
    )

    assert response.status_code == 200
    assert response.json() == {"mode": "local", "blocks": []}


def test_malformed_payload_maps_to_server_error():
    client = _build_client(FakeRemoteAdapter())

    response = client.post("/api/plan", json={"total_hours": "lots", "subjects": "Math"})

    assert response.status_code == 500
    assert "error" in response.json()


def test_missing_service_returns_503():
    app = FastAPI()
    app.include_router(plan_router)
    client = TestClient(app)

    response = client.post(
        "/api/plan",
        json={"total_hours": 1.0, "subjects": SUBJECTS_PAYLOAD},
    )

    assert response.status_code == 503


def test_budget_beyond_one_day_is_rejected():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 24.5, "start_time": "08:00", "subjects": SUBJECTS_PAYLOAD},
    )

    assert response.status_code == 500
    assert "error" in response.json()


def test_full_day_budget_is_accepted():
    client = _build_client(FakeRemoteAdapter())

    response = client.post(
        "/api/plan",
        json={"total_hours": 24, "start_time": "00:00", "subjects": SUBJECTS_PAYLOAD},
    )

    assert response.status_code == 200
    assert response.json()["mode"] == "local"
