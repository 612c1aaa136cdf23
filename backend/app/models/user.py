# app/models/user.py

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.models.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_type = Column(String(6), nullable=False)
    first = Column(String(30), nullable=False)
    last = Column(String(30), nullable=False)
    # Login email; email2 is the contact address and may differ
    email1 = Column(String(100), unique=True, nullable=False, index=True)
    email2 = Column(String(100), nullable=False)
    dob = Column(Date, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)


class UserSubjectLevel(Base):
    __tablename__ = "user_subject_levels"
    __table_args__ = (UniqueConstraint("user_id", "subject", "level"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Denormalized from users so search results need no join
    first = Column(String(30), nullable=False)
    last = Column(String(30), nullable=False)
    user_type = Column(String(6), nullable=False, index=True)

    subject = Column(String(50), nullable=False, index=True)
    level = Column(String(20), nullable=False)
