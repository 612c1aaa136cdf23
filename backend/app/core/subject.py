# app/core/subject.py

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, ValidationError
from app.core.user import USER_TYPES
from app.models.user import User, UserSubjectLevel

SUBJECTS = (
    "Maths", "English", "Biology", "Chemistry", "Physics", "Geography", "History",
    "Design and Technology", "ICT", "Computer Science", "Religious Education", "Art",
    "French", "German", "Spanish", "Italian",
)
LEVELS = (
    "GCSE", "A level", "Year 7", "Year 8", "Year 9", "Year 10", "Year 11", "Year 12", "Year 13",
)


def add_subject(db: Session, user: User, subject, level) -> UserSubjectLevel:
    """Declare that a user needs (client) or teaches (tutor) a subject at a level."""
    reasons = []
    if subject not in SUBJECTS:
        reasons.append("subjectInvalid")
    if level not in LEVELS:
        reasons.append("levelInvalid")
    if reasons:
        raise ValidationError(reasons)

    existing = (
        db.query(UserSubjectLevel)
        .filter(
            UserSubjectLevel.user_id == user.id,
            UserSubjectLevel.subject == subject,
            UserSubjectLevel.level == level,
        )
        .first()
    )
    if existing:
        raise Conflict("subject already declared")

    entry = UserSubjectLevel(
        user_id=user.id,
        first=user.first,
        last=user.last,
        user_type=user.user_type,
        subject=subject,
        level=level,
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("subject already declared")
    db.refresh(entry)
    return entry


def search(db: Session, user_type, subject, level: Optional[str] = None) -> List[UserSubjectLevel]:
    """Find counterparts: clients search tutors and tutors search clients.

    Clients must name a level; tutors may leave it out to match every level.
    """
    reasons = []
    if user_type not in USER_TYPES:
        reasons.append("userTypeInvalid")
    if subject not in SUBJECTS:
        reasons.append("subjectInvalid")
    if level and level not in LEVELS:
        reasons.append("levelInvalid")
    if reasons:
        raise ValidationError(reasons)

    if user_type == "client" and not level:
        raise ValidationError("Missing search param")

    find_these = "tutor" if user_type == "client" else "client"
    query = db.query(UserSubjectLevel).filter(
        UserSubjectLevel.user_type == find_these,
        UserSubjectLevel.subject == subject,
    )
    if level:
        query = query.filter(UserSubjectLevel.level == level)

    return query.order_by(UserSubjectLevel.id).all()


def serialize_entry(entry: UserSubjectLevel) -> dict:
    return {
        "id": entry.id,
        "userId": entry.user_id,
        "first": entry.first,
        "last": entry.last,
        "userType": entry.user_type,
        "subject": entry.subject,
        "level": entry.level,
    }
