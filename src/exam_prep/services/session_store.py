"""Client-scoped storage for quiz session slots."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from exam_prep.domain.sessions import QuizSession

logger = logging.getLogger(__name__)

SessionSlot = Literal["current", "last_results"]

CURRENT_SLOT: SessionSlot = "current"
LAST_RESULTS_SLOT: SessionSlot = "last_results"

SLOT_KEYS: dict[str, str] = {
    CURRENT_SLOT: "currentQuizSession",
    LAST_RESULTS_SLOT: "lastQuizResults",
}


class SessionStore(Protocol):
    """Key-value interface holding the in-progress and last-results slots."""

    def get(self, slot: SessionSlot) -> QuizSession | None:
        """Return the session stored in a slot, if present."""

    def set(self, slot: SessionSlot, session: QuizSession) -> None:
        """Store a session in a slot, replacing any previous value."""

    def remove(self, slot: SessionSlot) -> None:
        """Clear a slot."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Dict-backed session store for a single client."""

    _slots: dict[str, QuizSession]

    def __init__(self) -> None:
        self._slots = {}

    def get(self, slot: SessionSlot) -> QuizSession | None:
        """Return the session in the slot, if any."""
        return self._slots.get(slot)

    def set(self, slot: SessionSlot, session: QuizSession) -> None:
        """Store the session in the slot."""
        self._slots[slot] = session

    def remove(self, slot: SessionSlot) -> None:
        """Clear the slot."""
        self._slots.pop(slot, None)


DEFAULT_MAX_CLIENTS = 10_000


def in_memory_store_factory(
    max_clients: int = DEFAULT_MAX_CLIENTS,
) -> Callable[[str], SessionStore]:
    """Return a factory handing out one in-memory store per client id.

    At most ``max_clients`` stores are kept. The least recently used client
    is dropped when a new one would exceed the limit.
    """
    if max_clients < 1:
        raise ValueError("max_clients must be positive")
    stores: OrderedDict[str, InMemorySessionStore] = OrderedDict()

    def factory(client_id: str) -> SessionStore:
        store = stores.get(client_id)
        if store is None:
            store = InMemorySessionStore()
            stores[client_id] = store
            while len(stores) > max_clients:
                evicted, _ = stores.popitem(last=False)
                logger.debug("Evicted session store for client %s", evicted)
        else:
            stores.move_to_end(client_id)
        return store

    return factory
