# app/api/subjects.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.subject import add_subject, search, serialize_entry
from app.infra.postgres import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subjects")


class AddSubjectSchema(BaseModel):
    subject: str = ""
    level: str = ""


class SearchSchema(BaseModel):
    userType: str = ""
    subject: str = ""
    level: Optional[str] = None


@router.post("")
def add_subject_endpoint(
    payload: AddSubjectSchema,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    add_subject(db, user, payload.subject, payload.level)
    logger.info("User %s declared %s / %s", user.id, payload.subject, payload.level)
    return {"outcome": "success"}


@router.post("/search")
def search_endpoint(payload: SearchSchema, db: Session = Depends(get_db)):
    """Open to anonymous visitors, like the original search page."""
    entries = search(db, payload.userType, payload.subject, payload.level)
    return {"outcome": "success", "result": [serialize_entry(e) for e in entries]}
