"""Implementation of (Match)Repository using a dictionary"""

import threading
from uuid import UUID, uuid4

from src.store.repository import MatchRecord


class InMemoryMatchRepository:
    """Matches stored in a dict guarded by a lock (several collaborator threads may register matches at once)"""

    def __init__(self) -> None:
        self._matches: dict[UUID, MatchRecord] = {}
        self._lock = threading.Lock()

    def get_match(self, match_id: UUID) -> MatchRecord | None:
        with self._lock:
            return self._matches.get(match_id)

    def create_match(self, record: MatchRecord) -> UUID:
        match_id = uuid4()
        with self._lock:
            self._matches[match_id] = record
        return match_id

    def delete_match(self, match_id: UUID) -> MatchRecord | None:
        with self._lock:
            return self._matches.pop(match_id, None)

    def list_matches(self) -> list[UUID]:
        with self._lock:
            return list(self._matches.keys())
