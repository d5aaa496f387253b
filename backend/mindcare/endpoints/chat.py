# mindcare/endpoints/chat.py
from typing import Optional

from fastapi import APIRouter, Depends

from mindcare.endpoints.deps import get_store
from mindcare.models.care_models import ChatMessageCreate, ChatSessionCreate
from mindcare.services import chat_service
from mindcare.services.entity_store import EntityStore

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.get("")
def list_chat_sessions(
    patientId: Optional[str] = None,
    doctorId: Optional[str] = None,
    store: EntityStore = Depends(get_store),
):
    return {"success": True, "chatSessions": chat_service.list_sessions(store, patientId, doctorId)}


@router.post("")
def create_chat_session(payload: ChatSessionCreate, store: EntityStore = Depends(get_store)):
    session = chat_service.create_session(store, payload.model_dump())
    return {"success": True, "sessionId": session["id"], "chatSession": session}


@router.post("/{session_id}/messages")
def post_chat_message(session_id: str, payload: ChatMessageCreate, store: EntityStore = Depends(get_store)):
    result = chat_service.post_message(store, session_id, payload.content)
    return {"success": True, "response": result["reply"], "chatSession": result["session"]}
