"""Protocol repository for running matches (sessions live in memory, nothing outlives the process)"""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from src.core.shared_types import Variant
from src.rules.session import GameSession


@dataclass
class MatchRecord:
    """A running session + what it was created from"""

    variant: Variant
    session: GameSession


class MatchRepository(Protocol):
    """Registry of running matches"""

    def get_match(self, match_id: UUID) -> MatchRecord | None:
        """Get match by ID, if it exists."""
        ...

    def create_match(self, record: MatchRecord) -> UUID:
        """Store new match and return the newly created match ID."""
        ...

    def delete_match(self, match_id: UUID) -> MatchRecord | None:
        """Forget a match."""
        ...

    def list_matches(self) -> list[UUID]:
        """IDs of all matches currently registered."""
        ...
