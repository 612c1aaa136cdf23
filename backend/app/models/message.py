# app/models/message.py

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text

from app.models.base import Base


class Message(Base):
    __tablename__ = "messages"

    # Autoincrement id doubles as the tie-break when two messages share sent_at
    id = Column(Integer, primary_key=True, autoincrement=True)

    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Client supplied, stored as naive UTC
    sent_at = Column(DateTime, nullable=False)
    body = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
