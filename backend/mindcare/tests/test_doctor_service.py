# tests/test_doctor_service.py
from mindcare.services.doctor_service import (
    create_doctor,
    disease_catalog,
    list_doctors,
    matches_specialization,
    seed_directory,
    specialization_terms,
)


def test_specialization_terms_use_mapping():
    assert specialization_terms("Anxiety Disorders") == ["anxiety", "anxiety disorders"]
    assert specialization_terms("Grief") == ["grief"]


def test_matches_specialization_either_direction():
    assert matches_specialization("OCD & Anxiety Disorders", ["anxiety"])
    assert matches_specialization("ptsd", ["trauma & ptsd specialist"])
    assert not matches_specialization("Eating Disorders & Body Image", ["anxiety"])
    assert not matches_specialization(None, ["anxiety"])


def test_matches_specialization_tolerates_typos():
    assert matches_specialization("Anxiety & Depression Specialist", ["depresion"])
    assert not matches_specialization("OCD & Anxiety Disorders", ["depresion"])


def test_seed_directory_is_idempotent(store):
    assert seed_directory(store) == 7
    assert seed_directory(store) == 0
    assert len(list_doctors(store)) == 7


def test_list_doctors_by_specialization(store):
    seed_directory(store)

    names = {d["name"] for d in list_doctors(store, "Anxiety Disorders")}

    assert names == {"Dr. Sarah Johnson", "Dr. Robert Wilson"}


def test_create_doctor_sets_defaults(store):
    doctor = create_doctor(store, {"userId": "u-1", "name": "Dr. Kim", "specialization": "ADHD"})

    assert doctor["isAvailable"] is True
    assert doctor["rating"] == 0
    assert doctor["totalReviews"] == 0


def test_disease_catalog_shape():
    catalog = disease_catalog()

    assert len(catalog["diseases"]) == 8
    assert {d["id"] for d in catalog["doctors"]} >= {"dr001", "dr007"}
