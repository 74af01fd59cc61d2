"""Helpers for implementing Castling rules. Only geometry, the Board decides which castling moves are available."""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.rules.square import Square

# The rook must stand at least this many files away from the king: the king travels two files and the rook lands in between.
MIN_ROOK_DISTANCE = 3


class CastlingSide(Enum):
    """Values are the direction (along the rank) the king travels in."""

    KING_SIDE = 1
    QUEEN_SIDE = -1


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: The king moves two squares towards the rook, and the rook jumps over the king onto the square the king crossed.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def for_rook(cls, king_square: Square, rook_square: Square) -> Self:
        direction = 1 if rook_square.file > king_square.file else -1
        return cls(
            king_from=king_square,
            king_to=king_square.shifted(2 * direction, 0),
            rook_from=rook_square,
            rook_to=king_square.shifted(direction, 0),
        )

    def king_path(self) -> list[Square]:
        """Squares the king passes through or lands on. None of them may be attacked."""
        return [self.rook_to, self.king_to]
