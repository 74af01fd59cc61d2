"""
Type definitions used across layers
"""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Phase(StrEnum):
    """Classification of the position. Only the evaluator moves a game between these once it has started."""

    NOT_STARTED = "not started"
    STARTED = "started"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DEAD_POSITION = "dead position"


# Phases after which no more moves are requested.
TERMINAL_PHASES: frozenset[Phase] = frozenset({Phase.CHECKMATE, Phase.STALEMATE})


class Variant(StrEnum):
    CLASSIC = "classic"
    HORDE = "horde"
    CHECKMATE_TEST = "checkmate_test"
    PAWN_TEST = "pawn_test"
    TINY = "tiny"
