# app/core/user.py

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, Conflict, ValidationError
from app.core.security import hash_password, is_strong_password, new_session_id, verify_password
from app.models.user import User, UserSession

USER_TYPES = ("client", "tutor")

EMAIL_RE = re.compile(r"^[^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*@([A-Za-z0-9-]+\.)+[A-Za-z]{2,}$")
NAME_RE = re.compile(r"^[a-zA-Z]+(-[a-zA-Z]+)*$")

NAME_MIN, NAME_MAX = 2, 30
EMAIL_MAX = 100
PASSWORD_MAX = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_email(value) -> bool:
    return isinstance(value, str) and EMAIL_RE.match(value) is not None


def _parse_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def validate_registration(form: dict) -> date:
    """Collect every reason code for a registration form; returns the parsed dob."""
    reasons = []

    if form.get("userType") not in USER_TYPES:
        reasons.append("userTypeInvalid")

    for field, code in (("first", "firstNameInvalid"), ("last", "lastNameInvalid")):
        value = form.get(field) or ""
        if not NAME_RE.match(value):
            reasons.append(code)
        if not NAME_MIN <= len(value) <= NAME_MAX:
            reasons.append("nameLength")

    for field in ("email1", "email2"):
        value = form.get(field) or ""
        if not _is_email(value):
            reasons.append("emailInvalid")
        if len(value) > EMAIL_MAX:
            reasons.append(f"{field}Length")

    dob = _parse_date(form.get("dob"))
    if dob is None:
        reasons.append("dobInvalid")

    password = form.get("password") or ""
    if not is_strong_password(password):
        reasons.append("passwordStrength")
    if len(password) > PASSWORD_MAX:
        reasons.append("passwordLength")
    if password != form.get("confirm"):
        reasons.append("mismatchedPasswords")

    if reasons:
        # nameLength/emailInvalid can be reported twice, once per field
        raise ValidationError(list(dict.fromkeys(reasons)))
    return dob


def register_user(db: Session, form: dict) -> User:
    """Validate and insert a new user. Raises Conflict if email1 is taken."""
    dob = validate_registration(form)

    if db.query(User).filter(User.email1 == form["email1"]).first():
        raise Conflict("user already exists")

    user = User(
        user_type=form["userType"],
        first=form["first"],
        last=form["last"],
        email1=form["email1"],
        email2=form["email2"],
        dob=dob,
        password_hash=hash_password(form["password"]),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise Conflict("user already exists")
    db.refresh(user)
    return user


def authenticate(db: Session, email, password) -> User:
    reasons = []
    if not _is_email(email):
        reasons.append("emailInvalid")
    if not isinstance(password, str) or not is_strong_password(password):
        reasons.append("passwordInvalid")
    if reasons:
        raise ValidationError(reasons)

    user = db.query(User).filter(User.email1 == email).first()
    if user is None:
        raise AuthenticationError("user not found")
    if not verify_password(password, user.password_hash):
        raise AuthenticationError("incorrect password")
    return user


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


# ---------- SESSIONS ----------

def open_session(db: Session, user_id: int, max_age_seconds: int) -> str:
    session_id = new_session_id()
    db.add(UserSession(
        id=session_id,
        user_id=user_id,
        expires_at=_utcnow() + timedelta(seconds=max_age_seconds),
    ))
    db.commit()
    return session_id


def resolve_session(db: Session, session_id: Optional[str]) -> Optional[int]:
    """User id behind a session cookie, or None. Expired sessions are removed."""
    if not session_id:
        return None

    record = db.query(UserSession).filter(UserSession.id == session_id).first()
    if record is None:
        return None

    if record.expires_at <= _utcnow():
        db.delete(record)
        db.commit()
        return None

    return record.user_id


def close_session(db: Session, session_id: Optional[str]) -> None:
    if not session_id:
        return
    db.query(UserSession).filter(UserSession.id == session_id).delete()
    db.commit()
