# mindcare/endpoints/dashboard.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.errors import ValidationError
from mindcare.services import dashboard_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/doctor")
def doctor_dashboard(doctorId: Optional[str] = None, store: EntityStore = Depends(get_store)):
    if not doctorId:
        raise ValidationError("Doctor ID is required", field="doctorId")
    return {"success": True, "stats": dashboard_service.doctor_dashboard(store, doctorId)}


@router.get("/patient")
def patient_dashboard(patientId: Optional[str] = None, store: EntityStore = Depends(get_store)):
    if not patientId:
        raise ValidationError("Patient ID is required", field="patientId")
    return {"success": True, "stats": dashboard_service.patient_dashboard(store, patientId)}
