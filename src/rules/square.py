"""
A square on the board, and the bounds a board places on them.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.shared_types import Color


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8). Ranks may have more than one digit."""
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1:])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def shifted(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)


@dataclass(frozen=True)
class BoardBounds:
    """
    Which squares exist. Every board carries its own bounds, so variants are free to use other dimensions.
    """

    files: int
    ranks: int

    def contains(self, square: Square) -> bool:
        return (1 <= square.file <= self.files) and (1 <= square.rank <= self.ranks)

    def promotion_rank(self, color: Color) -> int:
        """White pawns move UP the board and promote on the top rank, black pawns promote on the first rank"""
        return self.ranks if color == Color.WHITE else 1


# Chess board is 8x8. Variants may choose otherwise
CLASSIC_BOUNDS = BoardBounds(8, 8)
