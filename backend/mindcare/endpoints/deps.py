# mindcare/endpoints/deps.py
from typing import Optional

from fastapi import Depends, Header
from pydantic import BaseModel
from sqlalchemy.orm import Session

from mindcare.database import get_db
from mindcare.services.entity_store import EntityStore


class Identity(BaseModel):
    """Caller identity as forwarded by the external identity provider."""

    userId: Optional[str] = None
    userType: Optional[str] = None


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_identity(
    x_user_id: Optional[str] = Header(default=None),
    x_user_type: Optional[str] = Header(default=None),
) -> Identity:
    return Identity(userId=x_user_id, userType=x_user_type)
