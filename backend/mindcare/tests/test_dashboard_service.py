# tests/test_dashboard_service.py
from datetime import date

from mindcare.models.documents import APPOINTMENTS, CHAT_SESSIONS, MESSAGES, MOOD_ENTRIES, PATIENTS
from mindcare.services.appointment_service import book_appointment, confirm, mark_complete
from mindcare.services.dashboard_service import (
    doctor_dashboard,
    doctor_patients,
    monthly_appointments,
    patient_dashboard,
)


def _appointment(store, patient_id, day, status="confirmed", doctor_id="doc-1"):
    store.create(APPOINTMENTS, {
        "doctorId": doctor_id,
        "patientId": patient_id,
        "patientName": patient_id.title(),
        "date": day,
        "time": "10:00",
        "type": "Follow-up",
        "status": status,
    })


def test_confirm_then_complete_moves_dashboard_counts(store, booking):
    appointment = book_appointment(store, booking)
    confirm(store, appointment["id"], "doc-1")

    stats = doctor_dashboard(store, "doc-1", today=date(2025, 6, 1))
    assert stats["todayAppointments"] == 1
    assert patient_dashboard(store, "pat-1")["completedAppointments"] == 0

    mark_complete(store, appointment["id"])
    assert patient_dashboard(store, "pat-1")["completedAppointments"] == 1


def test_patient_counts_use_confirmed_appointments(store):
    _appointment(store, "pat-a", "2025-06-01")
    _appointment(store, "pat-a", "2025-01-10")
    _appointment(store, "pat-b", "2025-02-01")
    _appointment(store, "pat-c", "2025-06-02", status="pending")
    _appointment(store, "pat-d", "2025-06-02", doctor_id="doc-2")

    stats = doctor_dashboard(store, "doc-1", today=date(2025, 6, 1))

    assert stats["totalPatients"] == 2
    assert stats["activePatients"] == 1
    assert stats["todayAppointments"] == 1


def test_pending_messages_counts_unread_to_doctor(store):
    store.create(MESSAGES, {"senderId": "pat-1", "receiverId": "doc-1", "isRead": False})
    store.create(MESSAGES, {"senderId": "pat-1", "receiverId": "doc-1", "isRead": True})
    store.create(MESSAGES, {"senderId": "doc-1", "receiverId": "pat-1", "isRead": False})

    assert doctor_dashboard(store, "doc-1", today=date(2025, 6, 1))["pendingMessages"] == 1


def test_monthly_buckets_span_seven_months():
    appointments = [
        {"status": "confirmed", "date": "2025-06-03"},
        {"status": "pending", "date": "2025-06-20T09:00:00Z"},
        {"status": "completed", "date": date(2025, 1, 15)},
        {"status": "confirmed", "date": "2025-07-01"},
        {"status": "cancelled", "date": "2025-06-04"},
        {"status": "confirmed", "date": "2024-12-31"},
        {"status": "confirmed", "date": "not-a-date"},
        {"status": "confirmed"},
    ]

    buckets = monthly_appointments(appointments, date(2025, 6, 15))

    assert [(b["month"], b["year"]) for b in buckets] == [
        ("Jan", 2025), ("Feb", 2025), ("Mar", 2025), ("Apr", 2025),
        ("May", 2025), ("Jun", 2025), ("Jul", 2025),
    ]
    assert [b["count"] for b in buckets] == [1, 0, 0, 0, 0, 2, 1]


def test_monthly_buckets_cross_year_boundary():
    buckets = monthly_appointments([], date(2025, 2, 10))

    assert buckets[0] == {"month": "Sep", "year": 2024, "count": 0}
    assert buckets[-1] == {"month": "Mar", "year": 2025, "count": 0}


def test_doctor_patients_joins_profiles(store):
    store.create(PATIENTS, {"id": "pat-a", "name": "Avery Stone", "email": "avery@example.com", "age": 29})
    _appointment(store, "pat-a", "2025-06-01")
    _appointment(store, "pat-a", "2025-05-01")
    _appointment(store, "pat-b", "2025-06-02")
    _appointment(store, "pat-c", "2025-06-02", status="pending")

    patients = doctor_patients(store, "doc-1")

    by_id = {p["id"]: p for p in patients}
    assert set(by_id) == {"pat-a", "pat-b"}
    assert by_id["pat-a"]["name"] == "Avery Stone"
    assert by_id["pat-a"]["totalAppointments"] == 2
    assert by_id["pat-b"]["name"] == "Pat-B"
    assert by_id["pat-b"]["primaryDiagnosis"] == "Not specified"

    assert [p["id"] for p in doctor_patients(store, "doc-1", search="avery")] == ["pat-a"]


def test_patient_mood_statistics(store):
    for day, value in [("2025-06-01", 7), ("2025-06-02", 8)]:
        store.create(MOOD_ENTRIES, {"patientId": "pat-1", "date": day, "value": value})
    store.create(MOOD_ENTRIES, {"patientId": "pat-2", "date": "2025-06-01", "value": 1})
    store.create(CHAT_SESSIONS, {"patientId": "pat-1", "messages": []})

    stats = patient_dashboard(store, "pat-1")

    assert stats["averageMood"] == 7.5
    assert stats["progressPercentage"] == 75
    assert stats["chatSessions"] == 1
    assert stats["moodData"] == [{"date": "2025-06-01", "value": 7}, {"date": "2025-06-02", "value": 8}]


def test_progress_is_capped(store):
    store.create(MOOD_ENTRIES, {"patientId": "pat-1", "date": "2025-06-01", "value": 9})

    assert patient_dashboard(store, "pat-1")["progressPercentage"] == 85


def test_mood_data_keeps_the_last_seven_entries(store):
    for day in range(1, 11):
        store.create(MOOD_ENTRIES, {"patientId": "pat-1", "date": f"2025-06-{day:02d}", "value": 5})

    mood = patient_dashboard(store, "pat-1")["moodData"]

    assert len(mood) == 7
    assert mood[0]["date"] == "2025-06-04"
    assert mood[-1]["date"] == "2025-06-10"


def test_patient_without_entries(store):
    stats = patient_dashboard(store, "nobody")

    assert stats["averageMood"] == 0
    assert stats["progressPercentage"] == 0
    assert stats["moodData"] == []


def test_average_mood_rounds_halves_up(store):
    for day, value in [("2025-06-01", 7), ("2025-06-02", 7), ("2025-06-03", 7), ("2025-06-04", 8)]:
        store.create(MOOD_ENTRIES, {"patientId": "pat-1", "date": day, "value": value})

    assert patient_dashboard(store, "pat-1")["averageMood"] == 7.3
