# mindcare/services/chat_service.py
"""Supportive chat assistant: a keyword responder with persisted sessions."""
import json
import logging
import re
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from mindcare.models.care_models import AlertType, Priority, UserType
from mindcare.models.documents import CHAT_SESSIONS
from mindcare.services import notification_service
from mindcare.services.entity_store import EntityStore
from mindcare.utils.timekeeping import isoformat_utc

logger = logging.getLogger(__name__)

# -------------------------------
# Load responder rules from JSON
# File: mindcare/data/chat_responses.json
# -------------------------------
DATA_DIR = Path(__file__).parent.parent / "data"
CHAT_RESPONSES_PATH = DATA_DIR / "chat_responses.json"

SHORT_MESSAGE_LENGTH = 10


def load_chat_rules() -> List[Dict[str, Any]]:
    if not CHAT_RESPONSES_PATH.exists():
        raise RuntimeError(f"❌ Critical: chat responses file not found at {CHAT_RESPONSES_PATH}")
    with open(CHAT_RESPONSES_PATH, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"❌ Invalid JSON in {CHAT_RESPONSES_PATH}: {e}")
    logger.info(f"✅ Loaded {len(data)} chat response rules")
    return data


CHAT_RULES = load_chat_rules()
_RULES_BY_ID = {rule["id"]: rule for rule in CHAT_RULES}


def _reply(rule: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "text": rule["response"],
        "category": rule["id"],
        "options": list(rule["options"]),
        "riskLevel": rule.get("riskLevel", "low"),
    }


def _mentions(keyword: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}", text) is not None


def handle_greetings(user_msg: str) -> Optional[Dict[str, Any]]:
    text = user_msg.lower().strip()
    rule = _RULES_BY_ID["greeting"]
    matched = [p for p in rule["greetings"] if re.search(rf"\b{re.escape(p)}\b", text)]
    if matched:
        return _reply(rule)
    return None


def get_response(user_msg: str) -> Dict[str, Any]:
    """Pick the reply for a user message.

    Crisis keywords always win, then greetings, then the first topic whose
    keywords appear. Very short messages with no topic are treated as a
    greeting; anything else gets the general reply.
    """
    text = user_msg.lower()

    crisis = _RULES_BY_ID["crisis"]
    if any(kw in text for kw in crisis["keywords"]):
        return _reply(crisis)

    greeting = handle_greetings(user_msg)
    if greeting:
        return greeting

    for rule in CHAT_RULES:
        if rule["id"] in ("crisis", "greeting", "general"):
            continue
        if any(_mentions(kw, text) for kw in rule["keywords"]):
            return _reply(rule)

    if len(text.strip()) < SHORT_MESSAGE_LENGTH:
        return _reply(_RULES_BY_ID["greeting"])

    return _reply(_RULES_BY_ID["general"])


# ------------------------------- Sessions -------------------------------
def create_session(store: EntityStore, data: Dict[str, Any]) -> Dict[str, Any]:
    session = {
        "patientId": data["patientId"],
        "title": data.get("title") or "New conversation",
        "messages": [],
        "status": "active",
        "updatedAt": isoformat_utc(),
    }
    if data.get("doctorId"):
        session["doctorId"] = data["doctorId"]
    session_id = store.create(CHAT_SESSIONS, session)
    return store.get(CHAT_SESSIONS, session_id)


def list_sessions(store: EntityStore, patient_id: Optional[str] = None, doctor_id: Optional[str] = None) -> List[Dict[str, Any]]:
    filters = {}
    if patient_id:
        filters["patientId"] = patient_id
    if doctor_id:
        filters["doctorId"] = doctor_id
    sessions = store.query(CHAT_SESSIONS, **filters)
    return sorted(sessions, key=lambda s: s.get("updatedAt", ""), reverse=True)


def post_message(store: EntityStore, session_id: str, content: str) -> Dict[str, Any]:
    """Append the user's message and the assistant's reply to a session."""
    session = store.get(CHAT_SESSIONS, session_id)
    reply = get_response(content)
    now = isoformat_utc()

    messages = list(session.get("messages", []))
    messages.append({
        "id": str(uuid.uuid4()),
        "content": content,
        "sender": "user",
        "timestamp": now,
        "metadata": {"category": reply["category"], "riskLevel": reply["riskLevel"]},
    })
    messages.append({
        "id": str(uuid.uuid4()),
        "content": reply["text"],
        "sender": "ai",
        "timestamp": now,
        "metadata": {"category": reply["category"], "options": reply["options"]},
    })
    store.update(CHAT_SESSIONS, session_id, {"messages": messages})

    if reply["category"] == "crisis" and session.get("doctorId"):
        _raise_crisis_alert(store, session)

    return {"session": store.get(CHAT_SESSIONS, session_id), "reply": reply}


def _raise_crisis_alert(store: EntityStore, session: Dict[str, Any]):
    try:
        notification_service.create_alert(store, {
            "doctorId": session["doctorId"],
            "patientId": session["patientId"],
            "type": AlertType.EMERGENCY.value,
            "message": "Crisis language detected in a chat session",
            "priority": Priority.HIGH.value,
            "recipientType": UserType.DOCTOR.value,
        })
        logger.warning(f"🚨 Crisis alert raised for patient {session['patientId']}")
    except Exception:
        logger.exception(f"Failed to raise crisis alert for session {session.get('id')}")
