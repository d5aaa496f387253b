# mindcare/services/entity_store.py
"""Document-oriented persistence over the ``documents`` table.

Every collection is a set of JSON documents keyed by id. String equality
filters are pushed into SQL through JSON path extraction; everything else
(and the filters themselves, again) is applied client-side.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mindcare.errors import NotFound, StoreError
from mindcare.models.documents import ALERTS, COLLECTIONS, Document
from mindcare.utils.timekeeping import isoformat_utc, utcnow

logger = logging.getLogger(__name__)

_LABELS = {
    "appointments": "Appointment",
    "patients": "Patient",
    "doctors": "Doctor",
    "alerts": "Alert",
    "messages": "Message",
    "moodEntries": "Mood entry",
    "chatSessions": "Chat session",
}

# Collections whose updates leave no updatedAt stamp
_UNSTAMPED = {ALERTS}

Predicate = Callable[[Dict[str, Any]], bool]


class EntityStore:
    """create / get / update / delete / query over named collections."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str, collection: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store {operation} on '{collection}' failed: {e}")
            raise StoreError(f"Storage unavailable while trying to {operation} {collection}") from e

    def _find(self, collection: str, doc_id: str) -> Optional[Document]:
        return (
            self.db.query(Document)
            .filter(Document.collection == collection, Document.id == doc_id)
            .first()
        )

    def _not_found(self, collection: str, doc_id: str) -> NotFound:
        label = _LABELS.get(collection, collection)
        return NotFound(f"{label} not found", id=doc_id)

    def create(self, collection: str, doc: Dict[str, Any]) -> str:
        _check_collection(collection)
        data = dict(doc)
        doc_id = str(data.pop("id", None) or uuid.uuid4())
        now = utcnow()
        data["createdAt"] = isoformat_utc(now)
        with self._guard("create", collection):
            next_seq = (
                self.db.query(func.coalesce(func.max(Document.seq), 0))
                .filter(Document.collection == collection)
                .scalar()
            ) + 1
            self.db.add(Document(collection=collection, id=doc_id, seq=next_seq,
                                 data=data, created_at=now))
            self.db.commit()
        return doc_id

    def get(self, collection: str, doc_id: str) -> Dict[str, Any]:
        _check_collection(collection)
        with self._guard("read", collection):
            row = self._find(collection, doc_id)
        if row is None:
            raise self._not_found(collection, doc_id)
        return row.as_dict()

    def update(self, collection: str, doc_id: str, patch: Dict[str, Any]) -> None:
        """Merge ``patch`` into the stored document."""
        _check_collection(collection)
        changes = {k: v for k, v in patch.items() if k not in ("id", "createdAt")}
        with self._guard("update", collection):
            row = self._find(collection, doc_id)
            if row is None:
                raise self._not_found(collection, doc_id)
            merged = {**(row.data or {}), **changes}
            if collection not in _UNSTAMPED:
                now = utcnow()
                merged["updatedAt"] = isoformat_utc(now)
                row.updated_at = now
            # reassign so the JSON column is flagged dirty
            row.data = merged
            self.db.commit()

    def delete(self, collection: str, doc_id: str) -> None:
        _check_collection(collection)
        with self._guard("delete", collection):
            row = self._find(collection, doc_id)
            if row is None:
                raise self._not_found(collection, doc_id)
            self.db.delete(row)
            self.db.commit()

    def query(self, collection: str, predicate: Optional[Predicate] = None, **filters: Any) -> List[Dict[str, Any]]:
        """Documents matching every equality filter and the optional predicate."""
        _check_collection(collection)
        with self._guard("query", collection):
            q = self.db.query(Document).filter(Document.collection == collection)
            for field, value in filters.items():
                if isinstance(value, str):
                    q = q.filter(Document.data[field].as_string() == value)
            rows = q.order_by(Document.seq).all()

        docs = [row.as_dict() for row in rows]
        docs = [d for d in docs if all(d.get(f) == v for f, v in filters.items())]
        if predicate is not None:
            docs = [d for d in docs if predicate(d)]
        return docs

    def count(self, collection: str, predicate: Optional[Predicate] = None, **filters: Any) -> int:
        return len(self.query(collection, predicate, **filters))


def _check_collection(collection: str):
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
