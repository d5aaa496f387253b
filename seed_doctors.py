# seed_doctors.py
from mindcare.database import Base, SessionLocal, engine
from mindcare.models import documents  # noqa: F401  registers the documents table
from mindcare.services.doctor_service import seed_directory
from mindcare.services.entity_store import EntityStore


def main():
    # Make sure the documents table exists before seeding
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_directory(EntityStore(db))
        print(f"✅ Seeded {added} doctors into the directory")
    finally:
        db.close()


if __name__ == "__main__":
    main()
