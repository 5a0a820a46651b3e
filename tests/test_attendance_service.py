from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from attendance_app.core.exceptions import InvalidAttendanceError
from attendance_app.models.attendance import Attendance, AttendanceStatus
from attendance_app.schemas.attendance import AttendanceCreate
from attendance_app.services.attendance import (
    AttendanceRow,
    AttendanceService,
    display_name,
    normalize_identifier,
    resolve_status,
    to_response,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("U1", "U1"),
        ("  E1 ", "E1"),
        (42, "42"),
        ("0", "0"),
        (0, None),
        (-3, None),
        ("", None),
        ("   ", None),
        (None, None),
        (True, None),
    ],
)
def test_normalize_identifier(value, expected):
    assert normalize_identifier(value) == expected


def test_resolve_status():
    assert resolve_status(None) is AttendanceStatus.PRESENT
    assert resolve_status("") is AttendanceStatus.PRESENT
    assert resolve_status("absent") is AttendanceStatus.ABSENT
    assert resolve_status(" present ") is AttendanceStatus.PRESENT

    with pytest.raises(InvalidAttendanceError):
        resolve_status("ABSENT")


def test_display_name_priority():
    assert display_name("U1", explicit="Named", user_name="Ada", event_title="Standup") == "Named"
    assert display_name("U1", user_name="Ada", event_title="Standup") == "Ada"
    assert display_name("U1", event_title="Standup") == "Standup"
    assert display_name("U1") == "User #U1"
    assert display_name(None) is None


def test_to_response_mirrors_created_at():
    created = datetime(2025, 3, 1, 9, 30)
    updated = datetime(2025, 3, 1, 9, 31)
    record = Attendance(
        id=5,
        user_id="U1",
        event_id="E1",
        status=AttendanceStatus.ABSENT,
        created_at=created,
        updated_at=updated,
    )

    response = to_response(AttendanceRow(record=record, user_name="Ada"))

    assert response.status == "absent"
    assert response.date == created
    assert response.updated_at == updated
    assert response.name == "Ada"
    assert response.model_dump(by_alias=True)["userId"] == "U1"


def test_payload_accepts_camel_case_and_ignores_extras():
    payload = AttendanceCreate.model_validate({"userId": 7, "eventId": "E1", "name": "x"})

    assert payload.user_id == 7
    assert payload.event_id == "E1"
    assert payload.status is None
    assert not hasattr(payload, "name")


def test_invalid_mark_never_reaches_the_store():
    # No database: validation must fail before a session is opened.
    service = AttendanceService(database=None)

    with pytest.raises(InvalidAttendanceError, match="userId and eventId are required"):
        asyncio.run(service.mark_attendance(AttendanceCreate(user_id="U1")))
