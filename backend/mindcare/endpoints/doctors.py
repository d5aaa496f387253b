# mindcare/endpoints/doctors.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.models.care_models import DoctorCreate
from mindcare.services import doctor_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(tags=["Doctors"])


@router.get("/doctors")
def list_doctors(specialization: Optional[str] = None, store: EntityStore = Depends(get_store)):
    return {"success": True, "doctors": doctor_service.list_doctors(store, specialization)}


@router.post("/doctors")
def create_doctor(payload: DoctorCreate, store: EntityStore = Depends(get_store)):
    doctor = doctor_service.create_doctor(store, payload.model_dump())
    return {"success": True, "doctorId": doctor["id"], "doctor": doctor}


@router.get("/diseases-doctors")
def diseases_doctors():
    """Static disease catalog and the bundled doctor directory."""
    return {"success": True, **doctor_service.disease_catalog()}
