# mindcare/endpoints/appointments.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import Identity, get_identity, get_store
from mindcare.models.care_models import AppointmentCreate, AppointmentUpdate, CancelRequest, StatusUpdate
from mindcare.services import appointment_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("")
def list_appointments(
    doctorId: Optional[str] = None,
    patientId: Optional[str] = None,
    date: Optional[str] = None,
    status: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    appointments = appointment_service.list_appointments(store, doctorId, patientId, date, status)
    return {"success": True, "appointments": appointments}


@router.post("")
def book_appointment(payload: AppointmentCreate, store: EntityStore = Depends(get_store)):
    appointment = appointment_service.book_appointment(store, payload.model_dump())
    return {"success": True, "appointmentId": appointment["id"], "appointment": appointment}


@router.get("/{appointment_id}")
def get_appointment(appointment_id: str, store: EntityStore = Depends(get_store)):
    return {"success": True, "appointment": appointment_service.get_appointment(store, appointment_id)}


@router.put("/{appointment_id}")
def update_appointment(appointment_id: str, payload: AppointmentUpdate, store: EntityStore = Depends(get_store)):
    appointment = appointment_service.update_details(store, appointment_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "appointment": appointment}


@router.patch("/{appointment_id}/status")
def update_status(
    appointment_id: str,
    payload: StatusUpdate,
    identity: Identity = Depends(get_identity),
    store: EntityStore = Depends(get_store),
):
    actor_id = identity.userId or payload.actorId
    appointment = appointment_service.update_status(store, appointment_id, payload.status, actor_id)
    return {"success": True, "appointment": appointment}


@router.post("/{appointment_id}/complete")
def complete_appointment(appointment_id: str, store: EntityStore = Depends(get_store)):
    return {"success": True, "appointment": appointment_service.mark_complete(store, appointment_id)}


@router.post("/{appointment_id}/cancel")
def cancel_appointment(
    appointment_id: str,
    payload: CancelRequest,
    identity: Identity = Depends(get_identity),
    store: EntityStore = Depends(get_store),
):
    patient_id = identity.userId or payload.patientId
    appointment = appointment_service.cancel_by_patient(store, appointment_id, patient_id, payload.reason)
    return {"success": True, "message": "Appointment cancelled successfully", "appointment": appointment}


@router.delete("/{appointment_id}")
def delete_appointment(appointment_id: str, store: EntityStore = Depends(get_store)):
    appointment_service.delete_appointment(store, appointment_id)
    return {"success": True}
