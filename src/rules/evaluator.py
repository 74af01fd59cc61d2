"""
Game-state evaluator: classifies the position at the start of every turn.

Rules are checked in this order, each short-circuiting the ones below:

1. a game that has not started is left alone
2. tentative phase: CHECK if the side to move's king is attacked, else STARTED
3. dead position: at most 3 pieces left, none of them a queen, rook or pawn
4. no legal moves: CHECKMATE if in check, STALEMATE otherwise
5. anything else: STARTED (or CHECK)
"""

import logging

from src.core.shared_types import Phase
from src.rules.board import Board
from src.rules.legality import has_legal_move
from src.rules.pieces import PieceType

logger = logging.getLogger(__name__)

DEAD_POSITION_MAX_PIECES = 3
MATING_MATERIAL: frozenset[PieceType] = frozenset(
    {PieceType.QUEEN, PieceType.ROOK, PieceType.PAWN}
)


def is_dead_position(board: Board) -> bool:
    """
    Coarse insufficient material check: the kings count towards the limit,
    and endings with two minor pieces are never dead.
    """
    if board.piece_count() > DEAD_POSITION_MAX_PIECES:
        return False
    return not any(piece.type in MATING_MATERIAL for piece in board.pieces.values())


def update_game_state(board: Board) -> bool:
    """
    Updates `board.phase`. Run at the start of every turn.

    Returns whether the phase changed.
    NOTE: a dead position is always reported as a change.
    """
    previous_phase = board.phase
    if previous_phase == Phase.NOT_STARTED:
        return False

    in_check = board.is_king_in_check(board.side_to_move)
    board.phase = Phase.CHECK if in_check else Phase.STARTED

    if is_dead_position(board):
        board.phase = Phase.DEAD_POSITION
        logger.info("Dead position: only %d pieces left", board.piece_count())
        return True

    if not has_legal_move(board):
        board.phase = Phase.CHECKMATE if in_check else Phase.STALEMATE

    changed = board.phase != previous_phase
    if changed:
        logger.info("Phase changed from %s to %s", previous_phase, board.phase)
    return changed
