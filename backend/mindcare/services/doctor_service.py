# mindcare/services/doctor_service.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rapidfuzz import fuzz

from mindcare.errors import NotFound
from mindcare.models.documents import DOCTORS
from mindcare.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DISEASES_PATH = DATA_DIR / "diseases.json"
DOCTORS_PATH = DATA_DIR / "doctors.json"

FUZZY_THRESHOLD = 85
FUZZY_MIN_LENGTH = 5

# Disease names shown in the UI -> terms doctors use in their specialization
SPECIALIZATION_MAPPING = {
    "Anxiety Disorders": ["anxiety", "anxiety disorders"],
    "Depression": ["depression"],
    "Bipolar Disorder": ["bipolar", "bipolar disorder"],
    "OCD": ["ocd"],
    "PTSD": ["ptsd"],
    "PTSD & Trauma": ["ptsd", "trauma"],
    "ADHD": ["adhd"],
    "Eating Disorders": ["eating disorders", "eating"],
    "Personality Disorders": ["personality disorders", "personality"],
    "Substance Abuse": ["substance abuse", "addiction"],
    "Schizophrenia": ["schizophrenia"],
}


def _load_json(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def specialization_terms(specialization: str) -> List[str]:
    return SPECIALIZATION_MAPPING.get(specialization, [specialization.lower()])


def matches_specialization(doctor_specialization: Optional[str], terms: List[str]) -> bool:
    """Case-insensitive match in either direction, with a fuzzy fallback for typos."""
    label = (doctor_specialization or "").lower().strip()
    if not label:
        return False
    for term in terms:
        term = term.lower()
        if label == term or term in label or label in term:
            return True
        if len(term) >= FUZZY_MIN_LENGTH and fuzz.partial_ratio(term, label) >= FUZZY_THRESHOLD:
            return True
    return False


def list_doctors(store: EntityStore, specialization: Optional[str] = None) -> List[Dict[str, Any]]:
    if not specialization:
        return store.query(DOCTORS)

    terms = specialization_terms(specialization)
    doctors = store.query(DOCTORS, lambda d: matches_specialization(d.get("specialization"), terms))
    logger.info(f"🔍 Specialization '{specialization}' matched {len(doctors)} doctors")
    return doctors


def create_doctor(store: EntityStore, data: Dict[str, Any]) -> Dict[str, Any]:
    doctor = {
        **data,
        "isAvailable": True,
        "rating": 0,
        "totalReviews": 0,
    }
    doctor_id = store.create(DOCTORS, doctor)
    return store.get(DOCTORS, doctor_id)


def disease_catalog() -> Dict[str, List[Dict[str, Any]]]:
    return {"diseases": _load_json(DISEASES_PATH), "doctors": _load_json(DOCTORS_PATH)}


def seed_directory(store: EntityStore) -> int:
    """Insert the bundled doctor directory, skipping doctors already present."""
    added = 0
    for entry in _load_json(DOCTORS_PATH):
        try:
            store.get(DOCTORS, entry["id"])
            continue
        except NotFound:
            pass
        store.create(DOCTORS, {
            "id": entry["id"],
            "userId": entry["id"],
            "name": entry["name"],
            "email": "",
            "specialization": entry["specialization"],
            "licenseNumber": "",
            "experience": entry.get("experience"),
            "qualifications": entry.get("qualifications", []),
            "isAvailable": True,
            "rating": 0,
            "totalReviews": 0,
        })
        added += 1
    logger.info(f"✅ Seeded {added} doctors")
    return added
