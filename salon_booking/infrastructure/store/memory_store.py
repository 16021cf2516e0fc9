from __future__ import annotations

import uuid

from salon_booking.application.ports.selection_store import SelectionStorePort
from salon_booking.application.use_cases.booking_selection import BookingSelection


class MemorySelectionStore(SelectionStorePort):
    def __init__(self, limit: int = 1000) -> None:
        self._selections: dict[str, BookingSelection] = {}
        self._limit = limit

    def create(self, selection: BookingSelection) -> str:
        session_id = uuid.uuid4().hex
        self._selections[session_id] = selection
        if len(self._selections) > self._limit:
            # dicts keep insertion order; drop the oldest flows
            for stale_id in list(self._selections)[: len(self._selections) - self._limit]:
                del self._selections[stale_id]
        return session_id

    def get(self, session_id: str) -> BookingSelection | None:
        return self._selections.get(session_id)

    def discard(self, session_id: str) -> None:
        self._selections.pop(session_id, None)
