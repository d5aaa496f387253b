# mindcare/endpoints/messages.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.errors import ValidationError
from mindcare.models.care_models import MessageCreate
from mindcare.models.documents import MESSAGES
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("")
def list_messages(
    userId: Optional[str] = None,
    conversationWith: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    if not userId:
        raise ValidationError("User ID is required", field="userId")

    if conversationWith:
        pair = {userId, conversationWith}
        messages = store.query(MESSAGES, lambda m: {m.get("senderId"), m.get("receiverId")} == pair)
        messages.sort(key=lambda m: m.get("createdAt", ""))
    else:
        messages = store.query(MESSAGES, receiverId=userId)
        messages.sort(key=lambda m: m.get("createdAt", ""), reverse=True)
    return {"success": True, "messages": messages}


@router.post("")
def send_message(payload: MessageCreate, store: EntityStore = Depends(get_store)):
    data = payload.model_dump()
    data["isRead"] = False
    message_id = store.create(MESSAGES, data)
    return {"success": True, "messageId": message_id, "message": store.get(MESSAGES, message_id)}


@router.post("/{message_id}/read")
def mark_message_read(message_id: str, store: EntityStore = Depends(get_store)):
    store.update(MESSAGES, message_id, {"isRead": True})
    return {"success": True}
