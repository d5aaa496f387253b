# mindcare/services/appointment_service.py
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from mindcare.errors import Forbidden, InvalidState, NotFound, TooLate, ValidationError
from mindcare.models.care_models import AppointmentStatus, AppointmentType, UserType
from mindcare.models.documents import APPOINTMENTS, PATIENTS
from mindcare.services import notification_service
from mindcare.services.entity_store import EntityStore
from mindcare.services.redis_client import publish_event
from mindcare.services.slot_service import slot_matches
from mindcare.utils.timekeeping import (
    appointment_datetime,
    hours_between,
    isoformat_utc,
    normalize_time,
    parse_date,
    utcnow,
)

# ------------------------------- Logging -------------------------------
logger = logging.getLogger(__name__)

# ------------------------------- Policy -------------------------------
CANCELLATION_WINDOW_HOURS = 24
CANCELLATION_POLICY = "Appointments can only be cancelled at least 24 hours in advance"
CANCELLATION_WARNING = "For urgent cancellations, please contact your doctor directly"
REJECT_DOUBLE_BOOKING = os.getenv("REJECT_DOUBLE_BOOKING", "false").lower() == "true"

PENDING = AppointmentStatus.PENDING.value
CONFIRMED = AppointmentStatus.CONFIRMED.value
COMPLETED = AppointmentStatus.COMPLETED.value
CANCELLED = AppointmentStatus.CANCELLED.value

VALID_TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}

REQUIRED_FIELDS = ("doctorId", "patientId", "patientName", "doctorName", "date", "time", "type")
IMMUTABLE_FIELDS = ("doctorId", "patientId")
EDITABLE_FIELDS = ("date", "time", "duration", "type", "notes")
APPOINTMENT_TYPES = {t.value for t in AppointmentType}


def can_transition(current: str, target: str) -> bool:
    return target in VALID_TRANSITIONS.get(current, set())


def _require_transition(appointment: Dict[str, Any], target: str):
    current = appointment.get("status")
    if not can_transition(current, target):
        raise InvalidState(
            f"Cannot move appointment from {current} to {target}",
            current_state=current,
        )


def _require_doctor(appointment: Dict[str, Any], actor_id: Optional[str]):
    if actor_id != appointment.get("doctorId"):
        logger.warning(
            f"🚫 Actor {actor_id} tried to act on appointment {appointment['id']} "
            f"owned by doctor {appointment.get('doctorId')}"
        )
        raise Forbidden("Only the assigned doctor can update this appointment")


def _validate_schedule(date_value: str, time_value: str) -> str:
    try:
        parse_date(date_value)
    except ValueError:
        raise ValidationError(f"Invalid date '{date_value}', expected YYYY-MM-DD", field="date")
    try:
        return normalize_time(time_value)
    except ValueError:
        raise ValidationError(f"Invalid time '{time_value}', expected HH:MM", field="time")


def _validate_type(value: str):
    if value not in APPOINTMENT_TYPES:
        raise ValidationError(
            f"Invalid appointment type '{value}'. Expected one of: {', '.join(sorted(APPOINTMENT_TYPES))}",
            field="type",
        )


# ------------------------------- Queries -------------------------------
def get_appointment(store: EntityStore, appointment_id: str) -> Dict[str, Any]:
    return store.get(APPOINTMENTS, appointment_id)


def list_appointments(
    store: EntityStore,
    doctor_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    date: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    filters = {}
    if doctor_id:
        filters["doctorId"] = doctor_id
    if patient_id:
        filters["patientId"] = patient_id
    if date:
        filters["date"] = date
    if status:
        filters["status"] = status
    appointments = store.query(APPOINTMENTS, **filters)
    return sorted(appointments, key=lambda a: a.get("createdAt", ""), reverse=True)


# ------------------------------- Booking -------------------------------
def book_appointment(store: EntityStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create a pending appointment and notify the doctor.

    Slot availability is the caller's job; double booking is only rejected
    when REJECT_DOUBLE_BOOKING is enabled.
    """
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Field '{field}' is required", field=field)

    time_value = _validate_schedule(data["date"], data["time"])
    _validate_type(data["type"])
    duration = data.get("duration") or 60
    if not isinstance(duration, int) or duration <= 0:
        raise ValidationError("Duration must be a positive number of minutes", field="duration")

    if REJECT_DOUBLE_BOOKING:
        taken = store.query(
            APPOINTMENTS,
            lambda a: a.get("status") in (PENDING, CONFIRMED) and slot_matches(a.get("time"), time_value),
            doctorId=data["doctorId"],
            date=data["date"],
        )
        if taken:
            raise ValidationError(f"The {time_value} slot on {data['date']} is already booked", field="time")

    appointment = {
        "doctorId": data["doctorId"],
        "patientId": data["patientId"],
        "patientName": data["patientName"],
        "doctorName": data["doctorName"],
        "date": data["date"].strip(),
        "time": time_value,
        "duration": duration,
        "type": data["type"],
        "status": PENDING,
    }
    if data.get("notes"):
        appointment["notes"] = data["notes"]

    appointment_id = store.create(APPOINTMENTS, appointment)
    appointment = store.get(APPOINTMENTS, appointment_id)
    logger.info(
        f"📅 Appointment {appointment_id} booked: patient {appointment['patientId']} "
        f"with doctor {appointment['doctorId']} on {appointment['date']} {appointment['time']}"
    )

    _assign_patient_doctor(store, appointment)
    notification_service.on_appointment_booked(store, appointment)
    publish_event("appointment.created", _event_payload(appointment))
    return appointment


def _assign_patient_doctor(store: EntityStore, appointment: Dict[str, Any]):
    """Point the patient's profile at the doctor just booked (last write wins)."""
    try:
        try:
            store.get(PATIENTS, appointment["patientId"])
        except NotFound:
            store.create(PATIENTS, {
                "id": appointment["patientId"],
                "name": appointment["patientName"],
                "doctorId": appointment["doctorId"],
                "userType": UserType.PATIENT.value,
            })
        else:
            store.update(PATIENTS, appointment["patientId"], {"doctorId": appointment["doctorId"]})
    except Exception:
        logger.exception(f"Failed to update profile of patient {appointment['patientId']}")


# ------------------------------- Transitions -------------------------------
def confirm(store: EntityStore, appointment_id: str, actor_id: Optional[str]) -> Dict[str, Any]:
    appointment = store.get(APPOINTMENTS, appointment_id)
    _require_doctor(appointment, actor_id)
    _require_transition(appointment, CONFIRMED)

    store.update(APPOINTMENTS, appointment_id, {"status": CONFIRMED})
    appointment = store.get(APPOINTMENTS, appointment_id)
    logger.info(f"✅ Appointment {appointment_id} confirmed by doctor {actor_id}")

    notification_service.on_status_changed(store, appointment, CONFIRMED)
    publish_event("appointment.confirmed", _event_payload(appointment))
    return appointment


def decline(store: EntityStore, appointment_id: str, actor_id: Optional[str]) -> Dict[str, Any]:
    appointment = store.get(APPOINTMENTS, appointment_id)
    _require_doctor(appointment, actor_id)
    if appointment.get("status") != PENDING:
        raise InvalidState("Only pending appointments can be declined", current_state=appointment.get("status"))

    store.update(APPOINTMENTS, appointment_id, {
        "status": CANCELLED,
        "cancelledBy": UserType.DOCTOR.value,
        "cancelledAt": isoformat_utc(),
    })
    appointment = store.get(APPOINTMENTS, appointment_id)
    logger.info(f"❎ Appointment {appointment_id} declined by doctor {actor_id}")

    notification_service.on_status_changed(store, appointment, CANCELLED)
    publish_event("appointment.cancelled", _event_payload(appointment))
    return appointment


def cancel_by_patient(
    store: EntityStore,
    appointment_id: str,
    patient_id: Optional[str],
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Patient-initiated cancellation, allowed until 24 hours before the visit."""
    appointment = store.get(APPOINTMENTS, appointment_id)

    if appointment.get("patientId") != patient_id:
        logger.warning(
            f"🚫 Patient {patient_id} tried to cancel appointment {appointment_id} "
            f"belonging to {appointment.get('patientId')}"
        )
        raise Forbidden("Unauthorized to cancel this appointment")

    status = appointment.get("status")
    if status == COMPLETED:
        raise InvalidState("Cannot cancel a completed appointment", current_state=status)
    if status == CANCELLED:
        raise InvalidState("Appointment is already cancelled", current_state=status)
    _require_transition(appointment, CANCELLED)

    try:
        starts_at = appointment_datetime(appointment["date"], appointment["time"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Appointment date/time cannot be interpreted", field="date")

    now = now or utcnow()
    if hours_between(starts_at, now) < CANCELLATION_WINDOW_HOURS:
        raise TooLate(CANCELLATION_POLICY, policy=CANCELLATION_POLICY, warning=CANCELLATION_WARNING)

    store.update(APPOINTMENTS, appointment_id, {
        "status": CANCELLED,
        "cancellationReason": reason or "No reason provided",
        "cancelledAt": isoformat_utc(now),
        "cancelledBy": UserType.PATIENT.value,
    })
    appointment = store.get(APPOINTMENTS, appointment_id)
    logger.info(f"🗓️ Appointment {appointment_id} cancelled by patient {patient_id}")

    notification_service.on_patient_cancelled(store, appointment)
    publish_event("appointment.cancelled", _event_payload(appointment))
    return appointment


def mark_complete(store: EntityStore, appointment_id: str) -> Dict[str, Any]:
    appointment = store.get(APPOINTMENTS, appointment_id)
    _require_transition(appointment, COMPLETED)

    store.update(APPOINTMENTS, appointment_id, {"status": COMPLETED, "completedAt": isoformat_utc()})
    appointment = store.get(APPOINTMENTS, appointment_id)
    logger.info(f"🏁 Appointment {appointment_id} marked complete")

    publish_event("appointment.completed", _event_payload(appointment))
    return appointment


def update_status(store: EntityStore, appointment_id: str, status: str, actor_id: Optional[str]) -> Dict[str, Any]:
    """Status-update surface: route a requested status to its transition."""
    if status not in VALID_TRANSITIONS:
        raise ValidationError(f"Unknown status '{status}'", field="status")
    if status == CONFIRMED:
        return confirm(store, appointment_id, actor_id)
    if status == CANCELLED:
        return decline(store, appointment_id, actor_id)
    if status == COMPLETED:
        return mark_complete(store, appointment_id)

    current = store.get(APPOINTMENTS, appointment_id).get("status")
    raise InvalidState(f"Cannot move appointment from {current} to {status}", current_state=current)


# ------------------------------- Administrative -------------------------------
def update_details(store: EntityStore, appointment_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    for field in IMMUTABLE_FIELDS:
        if field in patch:
            raise ValidationError(f"Field '{field}' cannot be changed after booking", field=field)
    if "status" in patch:
        raise ValidationError("Use the status endpoint to change an appointment's status", field="status")

    changes = {k: v for k, v in patch.items() if k in EDITABLE_FIELDS and v is not None}
    appointment = store.get(APPOINTMENTS, appointment_id)
    status = appointment.get("status")
    if status in (COMPLETED, CANCELLED):
        raise InvalidState(f"Cannot edit a {status} appointment", current_state=status)

    if "date" in changes or "time" in changes:
        date_value = str(changes.get("date", appointment.get("date", "")))
        changes["time"] = _validate_schedule(date_value, str(changes.get("time", appointment.get("time", ""))))
        changes["date"] = date_value.strip()
    if "duration" in changes and (not isinstance(changes["duration"], int) or changes["duration"] <= 0):
        raise ValidationError("Duration must be a positive number of minutes", field="duration")
    if "type" in changes:
        _validate_type(changes["type"])

    if changes:
        store.update(APPOINTMENTS, appointment_id, changes)
        appointment = store.get(APPOINTMENTS, appointment_id)
        publish_event("appointment.updated", _event_payload(appointment))
    return appointment


def delete_appointment(store: EntityStore, appointment_id: str) -> None:
    store.delete(APPOINTMENTS, appointment_id)
    logger.warning(f"🗑️ Appointment {appointment_id} deleted by administrator")


def _event_payload(appointment: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "appointmentId": appointment["id"],
        "doctorId": appointment.get("doctorId"),
        "patientId": appointment.get("patientId"),
        "status": appointment.get("status"),
    }
