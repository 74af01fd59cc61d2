"""
Legality filter
---

A candidate move is legal when

1. every landing square lies on the board (Remove steps have no landing square and are skipped), and
2. after playing it on a copy of the board, the king of the player who moved is not attacked.

The real board is never touched.
"""

import logging

from src.rules.board import Board
from src.rules.moves import Move

logger = logging.getLogger(__name__)


def is_within_bounds(move: Move, board: Board) -> bool:
    return all(board.inside_board(step.destination) for step in move.relocations())


def is_putting_yourself_in_check(move: Move, board: Board) -> bool:
    """Return True if the move puts (or leaves) you in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    simulation = board.copy()
    simulation.execute_move(move)
    return simulation.is_king_in_check(board.side_to_move)


def is_legal(move: Move, board: Board) -> bool:
    if not is_within_bounds(move, board):
        logger.debug("Rejected %s: lands outside the board", move)
        return False

    if is_putting_yourself_in_check(move, board):
        logger.debug("Rejected %s: leaves the %s king attacked", move, board.side_to_move)
        return False

    return True


def legal_moves(board: Board) -> list[Move]:
    """Candidate moves of every piece of the side to move, passed through the filter"""
    return [
        move
        for move in board.generate_candidate_moves(board.side_to_move)
        if is_legal(move, board)
    ]


def has_legal_move(board: Board) -> bool:
    return any(
        is_legal(move, board)
        for move in board.generate_candidate_moves(board.side_to_move)
    )
