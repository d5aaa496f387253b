# mindcare/models/documents.py
from sqlalchemy import Column, Integer, String, DateTime, JSON, Index
from datetime import datetime, timezone
from mindcare.database import Base

# Collection names
APPOINTMENTS = "appointments"
PATIENTS = "patients"
DOCTORS = "doctors"
ALERTS = "alerts"
MESSAGES = "messages"
MOOD_ENTRIES = "moodEntries"
CHAT_SESSIONS = "chatSessions"

COLLECTIONS = {APPOINTMENTS, PATIENTS, DOCTORS, ALERTS, MESSAGES, MOOD_ENTRIES, CHAT_SESSIONS}


def _utcnow():
    return datetime.now(timezone.utc)


class Document(Base):
    """One JSON document in a named collection."""

    __tablename__ = "documents"

    collection = Column(String(50), primary_key=True)
    id = Column(String(64), primary_key=True)
    # insertion order for stable query results
    seq = Column(Integer, nullable=False, default=0)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_documents_collection_seq", "collection", "seq"),)

    def as_dict(self) -> dict:
        return {"id": self.id, **(self.data or {})}
