# mindcare/endpoints/alerts.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.models.care_models import AlertCreate, MarkReadRequest
from mindcare.services import notification_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("")
def list_alerts(
    doctorId: Optional[str] = None,
    patientId: Optional[str] = None,
    isRead: Optional[bool] = None,
    store: EntityStore = Depends(get_store),
):
    alerts = notification_service.list_alerts(store, doctorId, patientId, isRead)
    return {"success": True, "alerts": alerts}


@router.post("")
def create_alert(payload: AlertCreate, store: EntityStore = Depends(get_store)):
    alert = notification_service.create_alert(store, payload.model_dump())
    return {"success": True, "alertId": alert["id"], "alert": alert}


@router.post("/mark-read")
def mark_read(payload: MarkReadRequest, store: EntityStore = Depends(get_store)):
    count = notification_service.mark_read(store, payload.doctorId, payload.patientId, payload.appointmentId)
    return {"success": True, "updated": count, "message": f"Marked {count} alerts as read"}
