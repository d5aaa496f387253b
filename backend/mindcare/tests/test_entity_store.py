# tests/test_entity_store.py
import pytest
from sqlalchemy.orm import sessionmaker

from mindcare.errors import NotFound, StoreError
from mindcare.models.documents import ALERTS, APPOINTMENTS, PATIENTS
from mindcare.services.entity_store import EntityStore


def test_create_and_get_roundtrip(store):
    doc_id = store.create(PATIENTS, {"name": "Alex", "age": 31})

    doc = store.get(PATIENTS, doc_id)

    assert doc["id"] == doc_id
    assert doc["name"] == "Alex"
    assert "createdAt" in doc


def test_create_keeps_caller_supplied_id(store):
    assert store.create(PATIENTS, {"id": "pat-42", "name": "Sam"}) == "pat-42"
    assert store.get(PATIENTS, "pat-42")["name"] == "Sam"


def test_get_missing_raises_not_found(store):
    with pytest.raises(NotFound) as exc:
        store.get(APPOINTMENTS, "nope")
    assert exc.value.message == "Appointment not found"
    assert exc.value.details["id"] == "nope"


def test_update_merges_and_stamps(store):
    doc_id = store.create(PATIENTS, {"name": "Alex", "email": "a@example.com"})

    store.update(PATIENTS, doc_id, {"email": "alex@example.com", "id": "ignored"})

    doc = store.get(PATIENTS, doc_id)
    assert doc["id"] == doc_id
    assert doc["name"] == "Alex"
    assert doc["email"] == "alex@example.com"
    assert "updatedAt" in doc


def test_alert_updates_are_not_stamped(store):
    alert_id = store.create(ALERTS, {"doctorId": "d", "isRead": False})
    store.update(ALERTS, alert_id, {"isRead": True})

    alert = store.get(ALERTS, alert_id)
    assert alert["isRead"] is True
    assert "updatedAt" not in alert


def test_query_filters_and_keeps_insertion_order(store):
    store.create(APPOINTMENTS, {"doctorId": "d1", "status": "pending"})
    store.create(APPOINTMENTS, {"doctorId": "d2", "status": "pending"})
    store.create(APPOINTMENTS, {"doctorId": "d1", "status": "confirmed"})

    found = store.query(APPOINTMENTS, doctorId="d1")
    assert [a["status"] for a in found] == ["pending", "confirmed"]

    assert store.count(APPOINTMENTS, doctorId="d1", status="confirmed") == 1
    assert store.count(APPOINTMENTS, lambda a: a["doctorId"] == "d2") == 1


def test_query_matches_non_string_values(store):
    store.create(ALERTS, {"doctorId": "d1", "isRead": False})
    store.create(ALERTS, {"doctorId": "d1", "isRead": True})

    assert store.count(ALERTS, doctorId="d1", isRead=False) == 1


def test_delete_removes_document(store):
    doc_id = store.create(PATIENTS, {"name": "Alex"})
    store.delete(PATIENTS, doc_id)

    with pytest.raises(NotFound):
        store.get(PATIENTS, doc_id)
    with pytest.raises(NotFound):
        store.delete(PATIENTS, doc_id)


def test_unknown_collection_is_rejected(store):
    with pytest.raises(ValueError):
        store.query("invoices")


def test_database_failure_becomes_retryable_store_error(engine):
    """No tables exist on this engine, so every statement fails."""
    session = sessionmaker(bind=engine)()
    broken = EntityStore(session)

    with pytest.raises(StoreError) as exc:
        broken.create(PATIENTS, {"name": "Alex"})

    assert exc.value.status_code == 503
    assert exc.value.to_dict()["retryable"] is True
    session.close()
