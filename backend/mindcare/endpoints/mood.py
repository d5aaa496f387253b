# mindcare/endpoints/mood.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.errors import ValidationError
from mindcare.models.care_models import MoodEntryCreate
from mindcare.models.documents import MOOD_ENTRIES
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/mood", tags=["Mood"])


@router.get("")
def list_mood_entries(
    patientId: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    if not patientId:
        raise ValidationError("Patient ID is required", field="patientId")

    entries = store.query(MOOD_ENTRIES, patientId=patientId)
    if startDate and endDate:
        entries = [e for e in entries if startDate <= e.get("date", "") <= endDate]
    entries.sort(key=lambda e: e.get("date", ""), reverse=True)
    return {"success": True, "moodEntries": entries}


@router.post("")
def create_mood_entry(payload: MoodEntryCreate, store: EntityStore = Depends(get_store)):
    entry_id = store.create(MOOD_ENTRIES, payload.model_dump(exclude_none=True))
    return {"success": True, "moodEntryId": entry_id, "moodEntry": store.get(MOOD_ENTRIES, entry_id)}
