# mindcare/endpoints/slots.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.services.entity_store import EntityStore
from mindcare.services.slot_service import available_slots

router = APIRouter(tags=["Slots"])


@router.get("/available-slots")
def get_available_slots(
    doctorId: Optional[str] = None,
    date: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    return {"success": True, **available_slots(store, doctorId, date)}
