# mindcare/endpoints/patients.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.models.care_models import PatientCreate, PatientUpdate, UserType
from mindcare.models.documents import PATIENTS
from mindcare.services import dashboard_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("")
def list_patients(
    doctorId: Optional[str] = None,
    search: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    if doctorId:
        return {"success": True, "patients": dashboard_service.doctor_patients(store, doctorId, search)}

    patients = sorted(store.query(PATIENTS), key=lambda p: p.get("createdAt", ""), reverse=True)
    if search:
        patients = [p for p in patients if search.lower() in (p.get("name") or "").lower()]
    return {"success": True, "patients": patients}


@router.post("")
def create_patient(payload: PatientCreate, store: EntityStore = Depends(get_store)):
    data = payload.model_dump(exclude_none=True)
    data["userType"] = UserType.PATIENT.value
    patient_id = store.create(PATIENTS, data)
    return {"success": True, "patientId": patient_id, "patient": store.get(PATIENTS, patient_id)}


@router.get("/{patient_id}")
def get_patient(patient_id: str, store: EntityStore = Depends(get_store)):
    return {"success": True, "patient": store.get(PATIENTS, patient_id)}


@router.put("/{patient_id}")
def update_patient(patient_id: str, payload: PatientUpdate, store: EntityStore = Depends(get_store)):
    store.update(PATIENTS, patient_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "patient": store.get(PATIENTS, patient_id)}


@router.delete("/{patient_id}")
def delete_patient(patient_id: str, store: EntityStore = Depends(get_store)):
    # appointments and alerts referencing the patient are left in place
    store.delete(PATIENTS, patient_id)
    return {"success": True}
