# mindcare/services/notification_service.py
"""Alerts for the counterpart party of an appointment transition.

Appointment state is authoritative; alerts are best-effort. The ``on_*``
hooks called from the lifecycle manager log and swallow their own failures
so a broken alert write never blocks or undoes a transition.
"""
import logging
from typing import Any, Dict, List, Optional

from mindcare.errors import ValidationError
from mindcare.models.care_models import AlertType, Priority, UserType
from mindcare.models.documents import ALERTS
from mindcare.services.entity_store import EntityStore
from mindcare.utils.timekeeping import coerce_date

logger = logging.getLogger(__name__)


# ------------------------------- Surface operations -------------------------------
def create_alert(store: EntityStore, data: Dict[str, Any]) -> Dict[str, Any]:
    alert = {
        "doctorId": data.get("doctorId", ""),
        "patientId": data.get("patientId", ""),
        "patientName": data.get("patientName", ""),
        "type": data.get("type", AlertType.APPOINTMENT.value),
        "message": data.get("message", ""),
        "priority": data.get("priority", Priority.MEDIUM.value),
        "recipientType": data.get("recipientType", UserType.DOCTOR.value),
        "isRead": False,
    }
    if data.get("appointmentId"):
        alert["appointmentId"] = data["appointmentId"]
    alert_id = store.create(ALERTS, alert)
    return store.get(ALERTS, alert_id)


def list_alerts(
    store: EntityStore,
    doctor_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    is_read: Optional[bool] = None,
) -> List[Dict[str, Any]]:
    """Alerts directed at one party, newest first.

    Without either id nothing is returned rather than every alert.
    """
    if doctor_id:
        alerts = store.query(ALERTS, doctorId=doctor_id, recipientType=UserType.DOCTOR.value)
    elif patient_id:
        alerts = store.query(ALERTS, patientId=patient_id, recipientType=UserType.PATIENT.value)
    else:
        return []

    if is_read is not None:
        alerts = [a for a in alerts if a.get("isRead") is is_read]
    return sorted(alerts, key=lambda a: a.get("createdAt", ""), reverse=True)


def mark_read(
    store: EntityStore,
    doctor_id: Optional[str],
    patient_id: Optional[str] = None,
    appointment_id: Optional[str] = None,
) -> int:
    """Mark a doctor's unread appointment alerts as read.

    With ``appointment_id`` only the alerts produced by that appointment
    match. Otherwise the match is on (doctor, patient?) and may clear
    several alerts at once. Returns the number of alerts updated.
    """
    if not doctor_id:
        raise ValidationError("Doctor ID is required", field="doctorId")

    filters = {
        "doctorId": doctor_id,
        "type": AlertType.APPOINTMENT.value,
        "recipientType": UserType.DOCTOR.value,
        "isRead": False,
    }
    if appointment_id:
        filters["appointmentId"] = appointment_id
    elif patient_id:
        filters["patientId"] = patient_id

    alerts = store.query(ALERTS, **filters)
    for alert in alerts:
        store.update(ALERTS, alert["id"], {"isRead": True})
    logger.info(f"🔕 Marked {len(alerts)} alerts as read for doctor {doctor_id}")
    return len(alerts)


# ------------------------------- Lifecycle hooks -------------------------------
def on_appointment_booked(store: EntityStore, appointment: Dict[str, Any]) -> Optional[str]:
    try:
        alert = create_alert(store, {
            "doctorId": appointment["doctorId"],
            "patientId": appointment["patientId"],
            "patientName": appointment.get("patientName", ""),
            "type": AlertType.APPOINTMENT.value,
            "message": f"New appointment request from {appointment.get('patientName', '')}",
            "priority": Priority.MEDIUM.value,
            "appointmentId": appointment["id"],
            "recipientType": UserType.DOCTOR.value,
        })
        return alert["id"]
    except Exception:
        logger.exception(f"Failed to alert doctor about appointment {appointment.get('id')}")
        return None


def on_status_changed(store: EntityStore, appointment: Dict[str, Any], status: str) -> Optional[str]:
    """Clear the doctor's request alerts, then tell the patient."""
    try:
        mark_read(store, appointment["doctorId"], patient_id=appointment["patientId"])
    except Exception:
        logger.exception(f"Failed to clear request alerts for appointment {appointment.get('id')}")

    try:
        alert = create_alert(store, {
            "doctorId": appointment["doctorId"],
            "patientId": appointment["patientId"],
            "patientName": appointment.get("patientName", ""),
            "type": AlertType.APPOINTMENT.value,
            "message": (
                f"Your appointment on {_display_date(appointment.get('date'))} "
                f"at {appointment.get('time')} has been {status}"
            ),
            "priority": Priority.MEDIUM.value,
            "appointmentId": appointment["id"],
            "recipientType": UserType.PATIENT.value,
        })
        return alert["id"]
    except Exception:
        logger.exception(f"Failed to alert patient about appointment {appointment.get('id')}")
        return None


def on_patient_cancelled(store: EntityStore, appointment: Dict[str, Any]) -> Optional[str]:
    try:
        mark_read(store, appointment["doctorId"], appointment_id=appointment["id"])
    except Exception:
        logger.exception(f"Failed to clear request alerts for appointment {appointment.get('id')}")

    try:
        alert = create_alert(store, {
            "doctorId": appointment["doctorId"],
            "patientId": appointment["patientId"],
            "patientName": appointment.get("patientName", ""),
            "type": AlertType.APPOINTMENT.value,
            "message": (
                f"{appointment.get('patientName', 'A patient')} cancelled the appointment on "
                f"{_display_date(appointment.get('date'))} at {appointment.get('time')}"
            ),
            "priority": Priority.HIGH.value,
            "appointmentId": appointment["id"],
            "recipientType": UserType.DOCTOR.value,
        })
        return alert["id"]
    except Exception:
        logger.exception(f"Failed to alert doctor about cancellation of {appointment.get('id')}")
        return None


def _display_date(value: Any) -> str:
    day = coerce_date(value)
    return day.isoformat() if day else str(value)
