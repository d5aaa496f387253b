# mindcare/services/slot_service.py
from typing import Dict, List, Optional

from mindcare.errors import ValidationError
from mindcare.models.care_models import AppointmentStatus
from mindcare.models.documents import APPOINTMENTS
from mindcare.services.entity_store import EntityStore


def generate_time_slots() -> List[Dict]:
    """All 24 hourly slots with their 12-hour display labels."""
    slots = []
    for hour in range(24):
        display_hour = hour % 12 or 12
        meridiem = "AM" if hour < 12 else "PM"
        slots.append({
            "value": f"{hour:02d}:00",
            "label": f"{display_hour}:00 {meridiem}",
            "hour": hour,
        })
    return slots


def slot_matches(booked_time: Optional[str], slot_value: str) -> bool:
    """True when a stored appointment time occupies the given ``HH:00`` slot.

    Bookings made through different paths store either form, so both the
    24-hour value and the 12-hour label count.
    """
    if not booked_time:
        return False
    for slot in generate_time_slots():
        if slot["value"] == slot_value:
            return booked_time in (slot["value"], slot["label"])
    return booked_time == slot_value


def available_slots(store: EntityStore, doctor_id: str, date: str) -> Dict:
    if not doctor_id or not date:
        raise ValidationError("Doctor ID and date are required")

    appointments = store.query(
        APPOINTMENTS,
        lambda a: a.get("status") != AppointmentStatus.CANCELLED.value,
        doctorId=doctor_id,
        date=date,
    )
    booked = [a.get("time") for a in appointments if a.get("time")]

    all_slots = generate_time_slots()
    free = [s for s in all_slots if s["value"] not in booked and s["label"] not in booked]
    return {
        "availableSlots": free,
        "bookedSlots": booked,
        "totalSlots": len(all_slots),
        "availableCount": len(free),
    }
