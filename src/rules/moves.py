"""
Move representation + Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the candidate move sets (and attacks) for each piece type.
The tables at the bottom of each section cover every PieceType.

Legality is checked later by the legality filter (src/rules/legality.py)
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self, Union

from src.core.exceptions import InvalidRequestError
from src.rules.castling import MIN_ROOK_DISTANCE, CastlingSide, CastlingSquares
from src.rules.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from src.rules.ruleset import Ruleset
from src.rules.square import BoardBounds, Square

UCI_PATTERN = re.compile(r"([a-z])(\d+)([a-z])(\d+)([nbrq]?)")

Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


# --- MOVE REPRESENTATION ---
@dataclass(frozen=True)
class Relocate:
    """Move whatever stands on `origin` to `destination` (capturing anything standing there)."""

    origin: Square
    destination: Square
    promote_to: Optional[PieceType] = None


@dataclass(frozen=True)
class Remove:
    """Take the piece on `origin` off the board. Has no landing square, so it is never bounds checked."""

    origin: Square


Step = Union[Relocate, Remove]


@dataclass(frozen=True)
class EnPassantTarget:
    """Left behind by a double pawn step, only valid for the very next move."""

    square: Square  # the square the pawn skipped over
    pawn_square: Square  # where the pawn that can be taken is standing
    color: Color  # color of that pawn


@dataclass(frozen=True)
class Move:
    """
    A move is an ordered sequence of atomic steps
    ---

    * ordinary move / capture / promotion: a single Relocate
    * castling: Relocate the king, then Relocate the rook
    * en passant: Relocate the pawn, then Remove the pawn that got taken
    """

    steps: tuple[Step, ...]
    piece_type: PieceType
    captured: Optional[PieceType] = None
    is_castling: bool = False
    is_en_passant: bool = False

    @classmethod
    def single(
        cls,
        from_square: Square,
        to_square: Square,
        piece_type: PieceType,
        captured: Optional[PieceType] = None,
        promote_to: Optional[PieceType] = None,
    ) -> Self:
        return cls(
            steps=(Relocate(from_square, to_square, promote_to),),
            piece_type=piece_type,
            captured=captured,
        )

    @property
    def from_square(self) -> Square:
        return self.steps[0].origin

    @property
    def to_square(self) -> Optional[Square]:
        """Destination of the first relocation (the one a player would point at)"""
        relocations = self.relocations()
        return relocations[0].destination if relocations else None

    @property
    def promote_to(self) -> Optional[PieceType]:
        relocations = self.relocations()
        return relocations[0].promote_to if relocations else None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def relocations(self) -> list[Relocate]:
        return [step for step in self.steps if isinstance(step, Relocate)]

    def to_uci(self) -> str:
        """
        Universal Chess Interface:
        ---
        <from_square><to_square>[promotion]

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side (the rook move is implied)
        """
        to_square = self.to_square
        if to_square is None:
            raise ValueError(f"Move without a relocation cannot be written as UCI: {self}")
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{to_square.to_algebraic()}{piece_char}"


def build_uci(
    from_square_alg: str, to_square_alg: str, promotion: Optional[PieceType] = None
) -> str:
    piece_char = PIECE_TO_FEN[promotion] if promotion else ""
    return f"{from_square_alg}{to_square_alg}{piece_char}"


def parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """Split a UCI string into its squares (+ promotion). The caller matches those against candidate moves."""
    match = UCI_PATTERN.fullmatch(uci)
    if match is None:
        raise InvalidRequestError(f"Cannot interpret {uci!r} as a UCI move.")
    from_file, from_rank, to_file, to_rank, promotion = match.groups()
    from_square = Square.from_algebraic(f"{from_file}{from_rank}")
    to_square = Square.from_algebraic(f"{to_file}{to_rank}")
    promote_to = FEN_TO_PIECE[promotion] if promotion else None
    return from_square, to_square, promote_to


class Board(Protocol):
    """Just the parts the movement strategies need"""

    bounds: BoardBounds
    ruleset: Ruleset
    en_passant: Optional[EnPassantTarget]

    def piece(self, square: Square) -> Optional[Piece]: ...
    def inside_board(self, square: Square) -> bool: ...
    def is_attacked(self, square: Square, by_color: Color) -> bool: ...


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    mover = board.piece(square)
    assert mover is not None

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.shifted(df, dr)
            if not board.inside_board(target_square):
                break

            occupant = board.piece(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != mover.color:
                    moves.append(
                        Move.single(
                            square, target_square, mover.type, captured=occupant.type
                        )
                    )
                break

            moves.append(Move.single(square, target_square, mover.type))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    mover = board.piece(square)
    assert mover is not None

    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.shifted(df, dr)
        if not board.inside_board(target_square):
            continue

        occupant = board.piece(target_square)
        if occupant is None:
            moves.append(Move.single(square, target_square, mover.type))
        elif occupant.color != mover.color:
            moves.append(
                Move.single(square, target_square, mover.type, captured=occupant.type)
            )
    return moves


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def reaches_promotion_rank(square: Square, color: Color, board: Board) -> bool:
    return square.rank == board.bounds.promotion_rank(color)


def on_home_ranks(square: Square, color: Color, board: Board) -> bool:
    """A pawn may only make a double step from its own first two ranks (Horde has pawns further up)"""
    return abs(square.rank - board.bounds.promotion_rank(color.opponent())) <= 1


def pawn_moves_w_promotion(
    from_square: Square,
    to_square: Square,
    color: Color,
    board: Board,
    captured: Optional[PieceType] = None,
) -> list[Move]:
    """Reaching the final rank? Return one copy of the move for every piece type to promote into."""
    if not reaches_promotion_rank(to_square, color, board):
        return [Move.single(from_square, to_square, PieceType.PAWN, captured=captured)]
    return [
        Move.single(
            from_square, to_square, PieceType.PAWN, captured=captured, promote_to=piece_type
        )
        for piece_type in PROMOTION_OPTIONS
    ]


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two from its first two ranks if it has not moved yet (and the variant allows it)
    - takes diagonally, including en passant
    - promotes when reaching the final rank
    """
    pawn = board.piece(square)
    assert pawn is not None
    forward = pawn_direction(pawn.color)

    moves: list[Move] = []
    one_step = square.shifted(0, forward)
    if board.inside_board(one_step) and board.piece(one_step) is None:
        moves.extend(pawn_moves_w_promotion(square, one_step, pawn.color, board))

        two_steps = square.shifted(0, 2 * forward)
        if (
            board.ruleset.pawn_double_step
            and not pawn.has_moved
            and on_home_ranks(square, pawn.color, board)
            and board.inside_board(two_steps)
            and board.piece(two_steps) is None
        ):
            moves.extend(pawn_moves_w_promotion(square, two_steps, pawn.color, board))

    # pawns take diagonally:
    for df in (1, -1):
        target_square = square.shifted(df, forward)
        if not board.inside_board(target_square):
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != pawn.color:
            moves.extend(
                pawn_moves_w_promotion(
                    square, target_square, pawn.color, board, captured=occupant.type
                )
            )

    moves.extend(en_passant_moves(square, board))
    return moves


def en_passant_moves(square: Square, board: Board) -> list[Move]:
    """
    Can the pawn on this square take the opponent's pawn that just made a double step?
    NOTE: The pawn taken is not on the landing square, so it gets an explicit Remove step.
    """
    pawn = board.piece(square)
    target = board.en_passant
    if pawn is None or target is None or target.color == pawn.color:
        return []

    forward = pawn_direction(pawn.color)
    on_adjacent_file = abs(target.square.file - square.file) == 1
    one_rank_ahead = target.square.rank == square.rank + forward
    if not (on_adjacent_file and one_rank_ahead):
        return []

    return [
        Move(
            steps=(Relocate(square, target.square), Remove(target.pawn_square)),
            piece_type=PieceType.PAWN,
            captured=PieceType.PAWN,
            is_en_passant=True,
        )
    ]


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) + candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move.
    """
    return single_step_move(square, board, KING_DELTAS) + candidate_castling_moves(
        square, board
    )


# -- CASTLING MOVES ---
def candidate_castling_moves(square: Square, board: Board) -> list[Move]:
    """
    **you are allowed to castle if**

    * Neither the king nor the rook have moved before.
    * You are not currently in check (you cannot castle out of check).
    * All squares in between the king and the rook are empty.
    * The king does not pass through (or land on) an attacked square.
    """
    king = board.piece(square)
    assert king is not None
    if not board.ruleset.castling or king.has_moved:
        return []

    opponent_color = king.color.opponent()
    if board.is_attacked(square, opponent_color):
        return []

    moves: list[Move] = []
    for side in CastlingSide:
        rook_square = first_occupied_on_rank(square, side.value, board)
        if rook_square is None:
            continue

        rook = board.piece(rook_square)
        assert rook is not None
        if rook.type != PieceType.ROOK or rook.color != king.color or rook.has_moved:
            continue
        if abs(rook_square.file - square.file) < MIN_ROOK_DISTANCE:
            continue

        squares = CastlingSquares.for_rook(square, rook_square)
        if any(board.is_attacked(sq, opponent_color) for sq in squares.king_path()):
            continue

        moves.append(castling_move(squares))
    return moves


def first_occupied_on_rank(square: Square, df: int, board: Board) -> Optional[Square]:
    """Walk along the rank until hitting a piece (returned) or the edge of the board (None)"""
    target_square = square.shifted(df, 0)
    while board.inside_board(target_square):
        if board.piece(target_square) is not None:
            return target_square
        target_square = target_square.shifted(df, 0)
    return None


def castling_move(squares: CastlingSquares) -> Move:
    return Move(
        steps=(
            Relocate(squares.king_from, squares.king_to),
            Relocate(squares.rook_from, squares.rook_to),
        ),
        piece_type=PieceType.KING,
        is_castling=True,
    )


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and type,
    moving along the given directions?"_

    ---
    Returns TRUE if the first piece encountered along any direction is of the specified color and type.
    """
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.shifted(df, dr)
            if not board.inside_board(target_square):
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type == by_piece_type:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    The equivalent of raycasting for pawns, kings, and knights: they only attack a single step away.
    """
    for df, dr in deltas:
        target_square = square.shifted(df, dr)
        if not board.inside_board(target_square):
            continue

        piece_found = board.piece(target_square)
        if (
            piece_found is not None
            and piece_found.color == by_color
            and piece_found.type == by_piece_type
        ):
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, vectors are exactly opposite to the ones used in `candidate_pawn_moves()`
    """
    backward = -pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(1, backward), (-1, backward)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.BISHOP, board, DIAGONALS)


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.ROOK, board, STRAIGHTS)


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(
        square, by_color, PieceType.QUEEN, board, STRAIGHTS + DIAGONALS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}
