# app/infra/message_store.py

import logging
from contextlib import contextmanager
from typing import List

from fastapi import Request
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.errors import StoreError
from app.core.message import MessageRecord, NewMessage
from app.infra.postgres import db_session
from app.models.message import Message

logger = logging.getLogger(__name__)


class MessageStore:
    """Append-only access to the messages table.

    Built once at startup from the app's session factory and handed to
    whoever needs it. Holds no state of its own between calls; every method
    opens and closes its own session.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str):
        try:
            with db_session(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise StoreError(f"{operation} failed: {e}") from e

    def append(self, message: NewMessage) -> int:
        """Insert one row and return the id the database assigned to it.

        There is no dedup: submitting the same message twice stores it twice.
        """
        with self._session("append") as session:
            row = Message(
                sender_id=message.sender_id,
                recipient_id=message.recipient_id,
                sent_at=message.sent_at,
                body=message.body,
            )
            session.add(row)
            session.flush()
            logger.debug("Appended message %s (%s -> %s)", row.id, row.sender_id, row.recipient_id)
            return row.id

    def fetch_by_participant(self, user_id: int) -> List[MessageRecord]:
        """Every message the user sent or received, in no particular order."""
        with self._session("fetch_by_participant") as session:
            rows = (
                session.query(Message)
                .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
                .all()
            )
            return [MessageRecord.from_row(r) for r in rows]

    def fetch_by_pair(self, user_a: int, user_b: int) -> List[MessageRecord]:
        """Every message exchanged between exactly these two users, either direction."""
        with self._session("fetch_by_pair") as session:
            rows = (
                session.query(Message)
                .filter(
                    or_(
                        and_(Message.sender_id == user_a, Message.recipient_id == user_b),
                        and_(Message.sender_id == user_b, Message.recipient_id == user_a),
                    )
                )
                .all()
            )
            return [MessageRecord.from_row(r) for r in rows]


def get_message_store(request: Request) -> MessageStore:
    """FastAPI dependency returning the store built by create_app()."""
    return request.app.state.message_store
