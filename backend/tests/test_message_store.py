"""Tests for the SQLAlchemy-backed message store."""

from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import StoreError
from app.core.message import NewMessage
from app.infra.message_store import MessageStore
from app.infra.postgres import create_db_engine, make_session_factory
from app.models.base import Base
from app.models.user import User


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)

    with factory() as db:
        for n in range(1, 5):
            db.add(User(
                id=n,
                user_type="client",
                first="User",
                last="Number",
                email1=f"user{n}@example.com",
                email2=f"user{n}@example.com",
                dob=date(2007, 1, 1),
                password_hash="scrypt$unused",
            ))
        db.commit()

    return factory


@pytest.fixture
def store(session_factory):
    return MessageStore(session_factory)


def new(sender, recipient, body="hello there"):
    return NewMessage(sender_id=sender, recipient_id=recipient, sent_at=datetime(2030, 1, 1, 12), body=body)


class TestAppend:
    def test_ids_strictly_increase(self, store):
        first = store.append(new(1, 2))
        second = store.append(new(2, 1))
        third = store.append(new(1, 3))
        assert first < second < third

    def test_duplicates_are_stored_twice(self, store):
        store.append(new(1, 2, "same"))
        store.append(new(1, 2, "same"))
        assert len(store.fetch_by_pair(1, 2)) == 2


class TestFetch:
    def test_fetch_by_participant(self, store):
        store.append(new(1, 2))
        store.append(new(3, 1))
        store.append(new(2, 3))

        records = store.fetch_by_participant(1)
        assert sorted((r.sender_id, r.recipient_id) for r in records) == [(1, 2), (3, 1)]

    def test_fetch_by_pair_is_symmetric(self, store):
        store.append(new(1, 2))
        store.append(new(2, 1))
        store.append(new(1, 3))

        forward = sorted(r.id for r in store.fetch_by_pair(1, 2))
        backward = sorted(r.id for r in store.fetch_by_pair(2, 1))
        assert forward == backward and len(forward) == 2

    def test_pair_matches_filtered_participant_history(self, store):
        for sender, recipient in [(1, 2), (2, 1), (1, 3), (4, 1), (2, 4)]:
            store.append(new(sender, recipient))

        by_pair = {r.id for r in store.fetch_by_pair(1, 4)}
        filtered = {r.id for r in store.fetch_by_participant(1) if 4 in (r.sender_id, r.recipient_id)}
        assert by_pair == filtered

    def test_unknown_user_has_no_messages(self, store):
        assert store.fetch_by_participant(99) == []

    def test_records_are_detached(self, store):
        store.append(new(1, 2, "kept after close"))
        (record,) = store.fetch_by_participant(1)
        assert record.body == "kept after close"
        assert record.sent_at == datetime(2030, 1, 1, 12)


class TestFailures:
    def test_connection_failure_raises_store_error(self):
        def broken_factory():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        store = MessageStore(broken_factory)
        with pytest.raises(StoreError) as excinfo:
            store.fetch_by_participant(1)

        assert excinfo.value.error == "generalError"
        assert "connection refused" in excinfo.value.detail

    def test_append_failure_raises_store_error(self, session_factory):
        store = MessageStore(session_factory)
        with pytest.raises(StoreError):
            # NOT NULL violation on body
            store.append(NewMessage(sender_id=1, recipient_id=2, sent_at=datetime(2030, 1, 1), body=None))
