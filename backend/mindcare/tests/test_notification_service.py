# tests/test_notification_service.py
from datetime import datetime, timezone

import pytest

from mindcare.errors import ValidationError
from mindcare.services import notification_service
from mindcare.services.appointment_service import book_appointment, cancel_by_patient, confirm, decline
from mindcare.services.notification_service import create_alert, list_alerts, mark_read


def test_booking_alerts_the_doctor(store, booking):
    appointment = book_appointment(store, booking)

    alerts = list_alerts(store, doctor_id="doc-1")

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert["message"] == "New appointment request from Alex Rivera"
    assert alert["isRead"] is False
    assert alert["appointmentId"] == appointment["id"]
    assert alert["recipientType"] == "doctor"
    assert list_alerts(store, patient_id="pat-1") == []


def test_confirm_clears_request_and_tells_patient(store, booking):
    """Doctor's request alert is read and the patient gets exactly one new alert."""
    appointment = book_appointment(store, booking)

    confirm(store, appointment["id"], "doc-1")

    assert list_alerts(store, doctor_id="doc-1", is_read=False) == []
    patient_alerts = list_alerts(store, patient_id="pat-1")
    assert len(patient_alerts) == 1
    assert patient_alerts[0]["message"] == "Your appointment on 2025-06-01 at 10:00 has been confirmed"


def test_decline_tells_patient(store, booking):
    appointment = book_appointment(store, booking)

    decline(store, appointment["id"], "doc-1")

    [alert] = list_alerts(store, patient_id="pat-1")
    assert alert["message"].endswith("has been cancelled")


def test_patient_cancellation_alerts_doctor(store, booking):
    appointment = book_appointment(store, booking)

    cancel_by_patient(store, appointment["id"], "pat-1", now=datetime(2025, 5, 1, tzinfo=timezone.utc))

    unread = list_alerts(store, doctor_id="doc-1", is_read=False)
    assert len(unread) == 1
    assert unread[0]["priority"] == "high"
    assert unread[0]["message"] == "Alex Rivera cancelled the appointment on 2025-06-01 at 10:00"


def test_mark_read_by_appointment_leaves_other_requests(store, booking):
    first = book_appointment(store, booking)
    book_appointment(store, {**booking, "date": "2025-06-08"})

    updated = mark_read(store, "doc-1", appointment_id=first["id"])

    assert updated == 1
    unread = list_alerts(store, doctor_id="doc-1", is_read=False)
    assert len(unread) == 1
    assert unread[0]["appointmentId"] != first["id"]


def test_mark_read_by_patient_clears_all_their_requests(store, booking):
    book_appointment(store, booking)
    book_appointment(store, {**booking, "date": "2025-06-08"})
    book_appointment(store, {**booking, "patientId": "pat-2", "patientName": "Jordan"})

    assert mark_read(store, "doc-1", patient_id="pat-1") == 2
    assert mark_read(store, "doc-1", patient_id="pat-1") == 0
    assert len(list_alerts(store, doctor_id="doc-1", is_read=False)) == 1


def test_mark_read_requires_doctor(store):
    with pytest.raises(ValidationError):
        mark_read(store, None)


def test_list_alerts_without_party_is_empty(store):
    create_alert(store, {"doctorId": "doc-1", "message": "hello"})
    assert list_alerts(store) == []


def test_list_alerts_newest_first(store):
    create_alert(store, {"doctorId": "doc-1", "message": "first", "type": "mood"})
    create_alert(store, {"doctorId": "doc-1", "message": "second", "type": "medication"})

    assert [a["message"] for a in list_alerts(store, doctor_id="doc-1")] == ["second", "first"]


def test_hooks_swallow_failures(store, booking, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("write failed")

    monkeypatch.setattr(notification_service, "create_alert", broken)

    appointment = book_appointment(store, booking)

    assert appointment["status"] == "pending"
    assert notification_service.on_status_changed(store, appointment, "confirmed") is None
