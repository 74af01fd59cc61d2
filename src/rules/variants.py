"""
Initial boards per variant.

A variant is nothing more than a factory returning a fresh Board (layout, bounds, rule switches).
The session gets one of these injected, selected by Variant identifier.
"""

from typing import Callable

from src.core.exceptions import UnknownVariantError
from src.core.shared_types import Variant
from src.rules.board import Board
from src.rules.ruleset import Ruleset
from src.rules.square import BoardBounds

BoardFactory = Callable[[], Board]

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
# Black keeps its regular army. White has 36 pawns and no king, so white is never in check.
# When white runs out of moves (e.g. all pawns captured) the game ends in stalemate, without a winner.
HORDE_POSITION = "rnbqkbnr/pppppppp/8/1PP2PP1/PPPPPPPP/PPPPPPPP/PPPPPPPP/PPPPPPPP"
# White to move mates with Ra8
CHECKMATE_TEST_POSITION = "6k1/5ppp/8/8/8/8/8/R5K1"
PAWN_TEST_POSITION = "4k3/pppppppp/8/8/8/8/PPPPPPPP/4K3"
# Gardner minichess
TINY_POSITION = "rnbqk/ppppp/5/PPPPP/RNBQK"
TINY_BOUNDS = BoardBounds(5, 5)
TINY_RULES = Ruleset(pawn_double_step=False, castling=False)


def classic_board() -> Board:
    return Board.from_fen(STARTING_POSITION)


def horde_board() -> Board:
    return Board.from_fen(HORDE_POSITION)


def checkmate_test_board() -> Board:
    return Board.from_fen(CHECKMATE_TEST_POSITION)


def pawn_test_board() -> Board:
    return Board.from_fen(PAWN_TEST_POSITION)


def tiny_board() -> Board:
    return Board.from_fen(TINY_POSITION, bounds=TINY_BOUNDS, ruleset=TINY_RULES)


VARIANT_FACTORIES: dict[Variant, BoardFactory] = {
    Variant.CLASSIC: classic_board,
    Variant.HORDE: horde_board,
    Variant.CHECKMATE_TEST: checkmate_test_board,
    Variant.PAWN_TEST: pawn_test_board,
    Variant.TINY: tiny_board,
}


def board_factory(variant: Variant | str) -> BoardFactory:
    """Look up the factory for a variant (accepts the Variant or its name)"""
    try:
        return VARIANT_FACTORIES[Variant(variant)]
    except (ValueError, KeyError) as err:
        raise UnknownVariantError(
            f"Unknown variant {variant!r}. Pick one from {','.join(v.value for v in Variant)}"
        ) from err


def create_initial_board(variant: Variant | str) -> Board:
    return board_factory(variant)()
