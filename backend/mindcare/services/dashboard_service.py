# mindcare/services/dashboard_service.py
"""Read-only dashboard statistics.

Every call scans the doctor's or patient's documents afresh; nothing is
cached.
"""
import calendar
import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd

from mindcare.errors import NotFound
from mindcare.models.care_models import AppointmentStatus
from mindcare.models.documents import APPOINTMENTS, CHAT_SESSIONS, MESSAGES, MOOD_ENTRIES, PATIENTS
from mindcare.services.entity_store import EntityStore
from mindcare.utils.timekeeping import clinic_today, coerce_date

CONFIRMED = AppointmentStatus.CONFIRMED.value
COMPLETED = AppointmentStatus.COMPLETED.value
HISTOGRAM_STATUSES = {CONFIRMED, COMPLETED, AppointmentStatus.PENDING.value}

ACTIVE_WINDOW_DAYS = 30
MONTHS_BEFORE = 5
MONTHS_AFTER = 1
PROGRESS_CAP = 85
RECENT_MOOD_ENTRIES = 7

# Sample series shown until real progress tracking exists
PATIENT_PROGRESS_SAMPLE = [
    {"week": "W1", "improved": 15, "stable": 12, "declined": 5},
    {"week": "W2", "improved": 18, "stable": 10, "declined": 4},
    {"week": "W3", "improved": 20, "stable": 8, "declined": 4},
    {"week": "W4", "improved": 22, "stable": 7, "declined": 3},
]
PROGRESS_DATA_SAMPLE = [
    {"name": "Anxiety", "value": 65},
    {"name": "Depression", "value": 45},
    {"name": "Sleep", "value": 80},
    {"name": "Stress", "value": 55},
]


# ------------------------------- Doctor -------------------------------
def doctor_dashboard(store: EntityStore, doctor_id: str, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or clinic_today()
    appointments = store.query(APPOINTMENTS, doctorId=doctor_id)
    confirmed = [a for a in appointments if a.get("status") == CONFIRMED]

    # lifetime count, despite the name
    total_patients = len({a.get("patientId") for a in confirmed})

    active_since = today - timedelta(days=ACTIVE_WINDOW_DAYS)
    active_patients = len({
        a.get("patientId") for a in confirmed
        if (coerce_date(a.get("date")) or date.min) >= active_since
    })

    today_appointments = sum(1 for a in confirmed if coerce_date(a.get("date")) == today)

    pending_messages = store.count(MESSAGES, receiverId=doctor_id, isRead=False)

    return {
        "totalPatients": total_patients,
        "activePatients": active_patients,
        "todayAppointments": today_appointments,
        "pendingMessages": pending_messages,
        "monthlyAppointments": monthly_appointments(appointments, today),
        "patientProgress": [dict(row) for row in PATIENT_PROGRESS_SAMPLE],
    }


def _shift_month(year: int, month: int, offset: int) -> tuple:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_appointments(appointments: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    """Per-month counts from five months back through next month.

    Dates that cannot be parsed are left out of every bucket.
    """
    buckets = [_shift_month(today.year, today.month, offset)
               for offset in range(-MONTHS_BEFORE, MONTHS_AFTER + 1)]

    counts = {}
    frame = pd.DataFrame(appointments, columns=["status", "date"])
    if not frame.empty:
        frame = frame[frame["status"].isin(list(HISTOGRAM_STATUSES))]
        parsed = frame["date"].map(coerce_date).dropna()
        counts = parsed.map(lambda d: f"{d.year:04d}-{d.month:02d}").value_counts().to_dict()

    return [
        {"month": calendar.month_abbr[month], "year": year, "count": int(counts.get(f"{year:04d}-{month:02d}", 0))}
        for year, month in buckets
    ]


def doctor_patients(store: EntityStore, doctor_id: str, search: Optional[str] = None) -> List[Dict[str, Any]]:
    """The doctor's patients, derived from confirmed appointments."""
    confirmed = store.query(APPOINTMENTS, doctorId=doctor_id, status=CONFIRMED)

    patients = {}
    for appointment in confirmed:
        patient_id = appointment.get("patientId")
        if patient_id in patients:
            continue
        try:
            details = store.get(PATIENTS, patient_id)
        except NotFound:
            details = {}
        patients[patient_id] = {
            "id": patient_id,
            "name": details.get("name") or appointment.get("patientName"),
            "email": details.get("email", ""),
            "age": details.get("age"),
            "gender": details.get("gender", "Not specified"),
            "doctorId": doctor_id,
            "primaryDiagnosis": details.get("primaryDiagnosis") or "Not specified",
            "emergencyContact": details.get("emergencyContact") or {"name": "", "phone": "", "relationship": ""},
            "lastAppointment": appointment.get("date"),
            "appointmentType": appointment.get("type"),
            "totalAppointments": sum(1 for a in confirmed if a.get("patientId") == patient_id),
        }

    result = list(patients.values())
    if search:
        needle = search.lower()
        result = [p for p in result if needle in (p.get("name") or "").lower()]
    return result


# ------------------------------- Patient -------------------------------
def _round_half_up(value: float) -> float:
    """One decimal place, halves rounded up (7.25 -> 7.3)."""
    return math.floor(value * 10 + 0.5) / 10


def patient_dashboard(store: EntityStore, patient_id: str) -> Dict[str, Any]:
    entries = store.query(MOOD_ENTRIES, patientId=patient_id)
    values = [e["value"] for e in entries if isinstance(e.get("value"), (int, float))]
    mean = sum(values) / len(values) if values else 0

    recent = sorted(entries, key=lambda e: (str(e.get("date", "")), e.get("createdAt", "")), reverse=True)
    mood_data = [{"date": e.get("date"), "value": e.get("value")} for e in recent[:RECENT_MOOD_ENTRIES]]
    mood_data.reverse()

    return {
        "averageMood": _round_half_up(mean),
        "chatSessions": store.count(CHAT_SESSIONS, patientId=patient_id),
        "completedAppointments": store.count(APPOINTMENTS, patientId=patient_id, status=COMPLETED),
        "progressPercentage": min(PROGRESS_CAP, mean / 10 * 100),
        "moodData": mood_data,
        "progressData": [dict(row) for row in PROGRESS_DATA_SAMPLE],
    }
