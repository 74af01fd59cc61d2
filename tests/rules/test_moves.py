"""Unit tests for /src/rules/moves.py"""

import pytest

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Variant
from src.rules.board import Board
from src.rules.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    PROMOTION_OPTIONS,
    Color,
    EnPassantTarget,
    Move,
    PieceType,
    Relocate,
    Remove,
    Square,
    build_uci,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    is_attacked_by_bishop,
    is_attacked_by_king,
    is_attacked_by_knight,
    is_attacked_by_pawn,
    is_attacked_by_queen,
    is_attacked_by_rook,
    parse_uci,
    raycasting_move,
)
from src.rules.pieces import Piece
from src.rules.ruleset import Ruleset
from src.rules.square import BoardBounds
from src.rules.variants import create_initial_board

EMPTY_FEN = "/".join(["8"] * 8)


def make_board(placements: dict[str, str], **kwargs) -> Board:
    """Empty board with pieces placed by square name -> FEN character"""
    board = Board.from_fen(EMPTY_FEN, **kwargs)
    for square_name, fen_char in placements.items():
        board.place_piece(Piece.from_fen(fen_char), Square.from_algebraic(square_name))
    return board


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


# -- MOVE CREATION, ENCODING/DECODING UCI NOTATION ---
@pytest.mark.parametrize(
    "from_uci, to_uci",
    [("e2", "e4"), ("a1", "a5"), ("d2", "e4"), ("g3", "a7")],
)
def test_converting_into_uci(from_uci: str, to_uci: str) -> None:
    move = Move.single(sq(from_uci), sq(to_uci), PieceType.ROOK)
    assert move.to_uci() == f"{from_uci}{to_uci}"


def test_converting_into_uci_incl_promotion() -> None:
    move = Move.single(sq("e7"), sq("e8"), PieceType.PAWN, promote_to=PieceType.QUEEN)
    assert move.to_uci() == "e7e8q"
    assert move.promote_to == PieceType.QUEEN


def test_castling_uci_only_shows_the_king() -> None:
    move = Move(
        steps=(Relocate(sq("e1"), sq("g1")), Relocate(sq("h1"), sq("f1"))),
        piece_type=PieceType.KING,
        is_castling=True,
    )
    assert move.to_uci() == "e1g1"


def test_parse_uci() -> None:
    assert parse_uci("e2e4") == (sq("e2"), sq("e4"), None)
    assert parse_uci("b7b8n") == (sq("b7"), sq("b8"), PieceType.KNIGHT)


@pytest.mark.parametrize("uci", ["", "e2", "e2e4k", "E2E4", "e2-e4"])
def test_parse_invalid_uci(uci: str) -> None:
    with pytest.raises(InvalidRequestError):
        parse_uci(uci)


def test_build_uci() -> None:
    assert build_uci("e7", "e8", PieceType.ROOK) == "e7e8r"
    assert build_uci("e2", "e4") == "e2e4"


def test_move_metadata() -> None:
    """The primary step decides from/to squares, the Remove step is not a relocation"""
    move = Move(
        steps=(Relocate(sq("e5"), sq("d6")), Remove(sq("d5"))),
        piece_type=PieceType.PAWN,
        captured=PieceType.PAWN,
        is_en_passant=True,
    )
    assert move.from_square == sq("e5")
    assert move.to_square == sq("d6")
    assert move.is_capture
    assert move.relocations() == [Relocate(sq("e5"), sq("d6"))]


# --- MOVEMENT RULES ---
def test_rules_cover_every_piece_type() -> None:
    assert set(MOVEMENT_RULES) == set(PieceType)
    assert set(ATTACK_RULES) == set(PieceType)


def test_raycasting_move_empty_board() -> None:
    """On an empty board, movements should only be restricted by board dimensions"""
    board = make_board({"a5": "R"})
    horizontal_moves = [(1, 0), (-1, 0)]
    moves = raycasting_move(sq("a5"), board, horizontal_moves)
    assert len(moves) == 7
    assert all(move.to_square.rank == 5 for move in moves)


def test_raycasting_move_w_enemy_blocker() -> None:
    """When running into enemy piece, still include it (as a capture)"""
    board = make_board({"d2": "R", "d5": "p"})
    moves = raycasting_move(sq("d2"), board, [(0, 1), (0, -1)])
    assert {move.to_uci() for move in moves} == {"d2d1", "d2d3", "d2d4", "d2d5"}
    capture = next(move for move in moves if move.to_square == sq("d5"))
    assert capture.captured == PieceType.PAWN


def test_raycasting_move_w_own_blocker() -> None:
    board = make_board({"d2": "R", "d5": "N"})
    moves = raycasting_move(sq("d2"), board, [(0, 1), (0, -1)])
    assert {move.to_uci() for move in moves} == {"d2d1", "d2d3", "d2d4"}


def test_raycasting_respects_board_bounds() -> None:
    """A 5x5 board stops the ray at the 5th file"""
    board = Board.from_fen("5/5/5/5/R4", bounds=BoardBounds(5, 5))
    moves = raycasting_move(sq("a1"), board, [(1, 0)])
    assert {move.to_uci() for move in moves} == {"a1b1", "a1c1", "a1d1", "a1e1"}


def test_knight_in_corner() -> None:
    board = make_board({"a1": "N"})
    moves = candidate_knight_moves(sq("a1"), board)
    assert {move.to_uci() for move in moves} == {"a1b3", "a1c2"}


def test_queen_on_empty_board() -> None:
    board = make_board({"d4": "Q"})
    assert len(candidate_queen_moves(sq("d4"), board)) == 27


def test_king_on_empty_board() -> None:
    """No rooks around, so no castling moves either"""
    board = make_board({"d4": "K"})
    assert len(candidate_king_moves(sq("d4"), board)) == 8


# --- PAWNS ---
def test_unmoved_pawn_double_step() -> None:
    board = make_board({"e2": "P"})
    moves = candidate_pawn_moves(sq("e2"), board)
    assert {move.to_uci() for move in moves} == {"e2e3", "e2e4"}


def test_black_pawn_moves_down() -> None:
    board = make_board({"e7": "p"})
    moves = candidate_pawn_moves(sq("e7"), board)
    assert {move.to_uci() for move in moves} == {"e7e6", "e7e5"}


def test_moved_pawn_single_step() -> None:
    board = make_board({"e3": "P"})
    board.piece(sq("e3")).has_moved = True
    moves = candidate_pawn_moves(sq("e3"), board)
    assert {move.to_uci() for move in moves} == {"e3e4"}


def test_no_double_step_if_variant_forbids() -> None:
    board = make_board({"e2": "P"}, ruleset=Ruleset(pawn_double_step=False))
    moves = candidate_pawn_moves(sq("e2"), board)
    assert {move.to_uci() for move in moves} == {"e2e3"}


def test_blocked_pawn() -> None:
    """A blocked pawn can also not jump over the blocker"""
    board = make_board({"e2": "P", "e3": "n"})
    assert candidate_pawn_moves(sq("e2"), board) == []


def test_pawn_captures_diagonally() -> None:
    board = make_board({"e2": "P", "d3": "n", "f3": "N"})
    moves = candidate_pawn_moves(sq("e2"), board)
    assert {move.to_uci() for move in moves} == {"e2e3", "e2e4", "e2d3"}
    capture = next(move for move in moves if move.to_square == sq("d3"))
    assert capture.captured == PieceType.KNIGHT


def test_pawn_promotion_options() -> None:
    board = make_board({"e7": "P", "d8": "r"})
    moves = candidate_pawn_moves(sq("e7"), board)
    pushes = [move for move in moves if move.to_square == sq("e8")]
    captures = [move for move in moves if move.to_square == sq("d8")]
    assert {move.promote_to for move in pushes} == set(PROMOTION_OPTIONS)
    assert {move.promote_to for move in captures} == set(PROMOTION_OPTIONS)
    assert all(move.captured == PieceType.ROOK for move in captures)


def test_en_passant_move() -> None:
    """The black pawn just made a double step d7d5. The white pawn on e5 can take it by moving to d6"""
    board = make_board({"e5": "P", "d5": "p"})
    board.piece(sq("e5")).has_moved = True
    board.en_passant = EnPassantTarget(square=sq("d6"), pawn_square=sq("d5"), color=Color.BLACK)
    moves = candidate_pawn_moves(sq("e5"), board)
    en_passant = [move for move in moves if move.is_en_passant]
    assert len(en_passant) == 1
    assert en_passant[0].steps == (Relocate(sq("e5"), sq("d6")), Remove(sq("d5")))
    assert en_passant[0].captured == PieceType.PAWN


def test_no_en_passant_on_own_pawn() -> None:
    board = make_board({"e5": "P", "d5": "P"})
    board.en_passant = EnPassantTarget(square=sq("d6"), pawn_square=sq("d5"), color=Color.WHITE)
    moves = candidate_pawn_moves(sq("e5"), board)
    assert not any(move.is_en_passant for move in moves)


def test_no_en_passant_from_far_away() -> None:
    board = make_board({"g5": "P", "d5": "p"})
    board.en_passant = EnPassantTarget(square=sq("d6"), pawn_square=sq("d5"), color=Color.BLACK)
    moves = candidate_pawn_moves(sq("g5"), board)
    assert not any(move.is_en_passant for move in moves)


# --- CAPTURING RULES / ATTACKING RULES ---
def test_attacked_by_pawn() -> None:
    """A white pawn on e4 covers d5 and f5, not the square in front of it"""
    board = make_board({"e4": "P", "d5": "p"})
    assert is_attacked_by_pawn(sq("d5"), Color.WHITE, board)
    assert is_attacked_by_pawn(sq("f5"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("e5"), Color.WHITE, board)
    # and the black pawn on d5 covers e4
    assert is_attacked_by_pawn(sq("e4"), Color.BLACK, board)


def test_attacked_by_knight() -> None:
    board = make_board({"g1": "N"})
    assert is_attacked_by_knight(sq("f3"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("g3"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("f3"), Color.BLACK, board)


def test_attacked_by_rook_blocked() -> None:
    board = make_board({"a1": "R", "a4": "p"})
    assert is_attacked_by_rook(sq("a4"), Color.WHITE, board)
    assert not is_attacked_by_rook(sq("a8"), Color.WHITE, board)


def test_attacked_by_bishop_and_queen() -> None:
    board = make_board({"c1": "B", "d8": "q"})
    assert is_attacked_by_bishop(sq("h6"), Color.WHITE, board)
    assert not is_attacked_by_bishop(sq("c3"), Color.WHITE, board)
    assert is_attacked_by_queen(sq("d1"), Color.BLACK, board)
    assert is_attacked_by_queen(sq("h4"), Color.BLACK, board)
    assert not is_attacked_by_queen(sq("e6"), Color.BLACK, board)


def test_attacked_by_king() -> None:
    board = make_board({"e1": "K"})
    assert is_attacked_by_king(sq("d2"), Color.WHITE, board)
    assert not is_attacked_by_king(sq("e3"), Color.WHITE, board)


def test_no_double_step_away_from_home_ranks() -> None:
    """An unmoved pawn further up the board (Horde) only moves a single square"""
    board = make_board({"b5": "P", "e6": "p"})
    assert {move.to_uci() for move in candidate_pawn_moves(sq("b5"), board)} == {"b5b6"}
    assert {move.to_uci() for move in candidate_pawn_moves(sq("e6"), board)} == {"e6e5"}


def test_horde_pawns_double_step_from_first_two_ranks_only() -> None:
    board = create_initial_board(Variant.HORDE)
    board.remove_piece(sq("b7"))
    assert {move.to_uci() for move in candidate_pawn_moves(sq("b5"), board)} == {"b5b6"}
    assert {move.to_uci() for move in candidate_pawn_moves(sq("a4"), board)} == {"a4a5"}

    # white's 2nd rank still may, once the squares in front are free
    board.remove_piece(sq("h3"))
    board.remove_piece(sq("h4"))
    assert {move.to_uci() for move in candidate_pawn_moves(sq("h2"), board)} == {"h2h3", "h2h4"}
