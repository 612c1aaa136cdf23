"""Grouping of a user's message history into conversation threads.

A conversation has no stored identity. It is the set of messages whose
unordered {sender, recipient} pair is the same, so it can be re-derived
from the message log at any time without coordinating ids at send time.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

PairKey = Tuple[int, int]


def pair_key(user_a: int, user_b: int) -> PairKey:
    """Canonical, order-independent key for two user ids (smaller id first)."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def conversation_id(user_a: int, user_b: int) -> str:
    """Stable identifier for the conversation between two users.

    A pure function of the pair, so both participants and every request
    derive the same value. Never allocated from a counter.
    """
    low, high = pair_key(user_a, user_b)
    return f"{low}-{high}"


def recency_key(message):
    # id breaks ties between messages sent at the same instant
    return (message.sent_at, message.id)


def order_thread(messages: Iterable) -> List:
    """Newest first by (sent_at, id)."""
    return sorted(messages, key=recency_key, reverse=True)


def group_by_pair(messages: Iterable) -> Dict[PairKey, List]:
    groups = defaultdict(list)
    for message in messages:
        groups[pair_key(message.sender_id, message.recipient_id)].append(message)
    return dict(groups)


def assemble_conversations(messages: Iterable) -> List[List]:
    """Partition a flat message list into threads.

    Each thread is ordered newest first. Threads are ordered by their
    newest message, most recent conversation first. The result does not
    depend on the order of the input.
    """
    threads = [order_thread(group) for group in group_by_pair(messages).values()]
    threads.sort(key=lambda thread: recency_key(thread[0]), reverse=True)
    return threads


def list_conversations(store, user_id: int) -> List[List]:
    """All conversation threads of a user. StoreError propagates unchanged."""
    return assemble_conversations(store.fetch_by_participant(user_id))


def conversation_with(store, user_id: int, other_id: int) -> List:
    """The single thread between two users, newest first."""
    return order_thread(store.fetch_by_pair(user_id, other_id))
