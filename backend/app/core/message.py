from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.conversations import conversation_id
from app.core.errors import ValidationError

BODY_MIN_LENGTH = 2
BODY_MAX_LENGTH = 500

# ISO-8601 including the "Z" suffix JavaScript clients send
_SENT_AT = TypeAdapter(datetime)


@dataclass(frozen=True)
class NewMessage:
    """A validated message that has not been stored yet."""

    sender_id: int
    recipient_id: int
    sent_at: datetime
    body: str


@dataclass(frozen=True)
class MessageRecord:
    """A stored message, detached from any DB session."""

    id: int
    sender_id: int
    recipient_id: int
    sent_at: datetime
    body: str

    @classmethod
    def from_row(cls, row) -> "MessageRecord":
        return cls(
            id=row.id,
            sender_id=row.sender_id,
            recipient_id=row.recipient_id,
            sent_at=row.sent_at,
            body=row.body,
        )


def to_naive_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_today(now: Optional[datetime] = None) -> datetime:
    now = to_naive_utc(now) if now is not None else datetime.now(timezone.utc).replace(tzinfo=None)
    return datetime.combine(now.date(), time.min)


def validate_new_message(
    sender_id,
    recipient_id,
    sent_at,
    body,
    now: Optional[datetime] = None,
) -> NewMessage:
    """Check an outgoing message and normalize it for storage.

    Every failing rule contributes a reason code; all of them are reported
    together in one ValidationError.
    """
    reasons = []

    for value in (sender_id, recipient_id):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            reasons.append("idInvalid")
            break

    if not reasons and sender_id == recipient_id:
        reasons.append("selfMessage")

    if isinstance(sent_at, str):
        try:
            sent_at = _SENT_AT.validate_python(sent_at)
        except PydanticValidationError:
            sent_at = None
    if not isinstance(sent_at, datetime):
        reasons.append("dateSentInvalid")
    else:
        sent_at = to_naive_utc(sent_at)
        if sent_at < start_of_today(now):
            reasons.append("dateSentInvalid")

    if not isinstance(body, str) or not BODY_MIN_LENGTH <= len(body) <= BODY_MAX_LENGTH:
        reasons.append("lengthError")

    if reasons:
        raise ValidationError(reasons)

    return NewMessage(
        sender_id=sender_id,
        recipient_id=recipient_id,
        sent_at=sent_at,
        body=body,
    )


def serialize_message(message: MessageRecord) -> dict:
    return {
        "id": message.id,
        "senderId": message.sender_id,
        "recipientId": message.recipient_id,
        "sentAt": message.sent_at.isoformat(),
        "body": message.body,
        "conversationId": conversation_id(message.sender_id, message.recipient_id),
    }
