"""The Game board holds the authoritative position and implements all rules that affect it"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Phase
from src.rules.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    CandidateMovesFn,
    EnPassantTarget,
    Move,
    Relocate,
    Remove,
)
from src.rules.pieces import Color, Piece, PieceType
from src.rules.ruleset import CLASSIC_RULES, Ruleset
from src.rules.square import CLASSIC_BOUNDS, BoardBounds, Square


@dataclass
class Board:
    """
    Sparse position: only occupied squares are keys of `pieces`.
    ---

    `phase` is stored here but only ever changed by the evaluator (src/rules/evaluator.py)
    """

    pieces: dict[Square, Piece]
    bounds: BoardBounds = CLASSIC_BOUNDS
    ruleset: Ruleset = CLASSIC_RULES
    side_to_move: Color = Color.WHITE
    phase: Phase = Phase.NOT_STARTED
    en_passant: Optional[EnPassantTarget] = field(default=None)

    @classmethod
    def from_fen(
        cls,
        fen_str: str,
        bounds: BoardBounds = CLASSIC_BOUNDS,
        ruleset: Ruleset = CLASSIC_RULES,
        side_to_move: Color = Color.WHITE,
    ) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        The number of ranks / files must match the bounds (numbers may have several digits on wide boards).
        """
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != bounds.ranks:
            raise InvalidFENError(
                f"Expected {bounds.ranks} ranks, found {len(fen_by_ranks)} in {fen_str!r}"
            )

        pieces: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank to bottom rank
            rank = bounds.ranks - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            empty_count = ""
            for character in fen_one_rank:
                if character.isdigit():
                    empty_count += character
                    continue
                if empty_count:
                    file += int(empty_count)
                    empty_count = ""
                try:
                    pieces[Square(file, rank)] = Piece.from_fen(character)
                except KeyError as err:
                    raise InvalidFENError(
                        f"Unknown piece {character!r} in {fen_str!r}"
                    ) from err
                file += 1
            if empty_count:
                file += int(empty_count)

            if file - 1 != bounds.files:
                raise InvalidFENError(
                    f"Rank {rank} describes {file - 1} files, expected {bounds.files}: {fen_str!r}"
                )
        return cls(pieces, bounds=bounds, ruleset=ruleset, side_to_move=side_to_move)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(self.bounds.ranks, 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, self.bounds.files + 1):
            piece = self.piece(Square(file, rank))
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """Independent copy for simulating moves"""
        return deepcopy(self)

    # -- QUERIES --
    def piece(self, square: Square) -> Optional[Piece]:
        return self.pieces.get(square)

    def inside_board(self, square: Square) -> bool:
        return self.bounds.contains(square)

    def piece_count(self) -> int:
        return len(self.pieces)

    def locate_pieces(self, piece_type: PieceType, color: Optional[Color] = None) -> list[Square]:
        return [
            square
            for square, piece in self.pieces.items()
            if piece.type == piece_type and (color is None or piece.color == color)
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.pieces.items() if piece.color == color]

    def is_attacked(self, square: Square, by_color: Color) -> bool:
        """Could any piece of `by_color` capture on this square?"""
        return any(rule(square, by_color, self) for rule in ATTACK_RULES.values())

    def is_king_in_check(self, color: Color) -> bool:
        """
        NOTE: Some variants (horde) leave one side without a king. Such a side can never be in check.
        """
        return any(
            self.is_attacked(square, color.opponent())
            for square in self.locate_pieces(PieceType.KING, color)
        )

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we use the movement rules of every piece to find candidate moves,
        which will later be tested for legality (making sure it does not put yourself in check.)
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece_type = self.pieces[starting_square].type
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece_type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    # -- UPDATES --
    def execute_move(self, move: Move) -> None:
        """
        Apply every step of the move, then hand the turn to the opponent.
        NOTE: No legality checks happen here. Also used on copies to simulate candidate moves.
        """
        for step in move.steps:
            if isinstance(step, Relocate):
                self._relocate(step)
            elif isinstance(step, Remove):
                self.remove_piece(step.origin)

        self.en_passant = self._en_passant_after(move)
        self.side_to_move = self.side_to_move.opponent()

    def _relocate(self, step: Relocate) -> None:
        piece_that_moved = self.pieces.pop(step.origin)
        piece_that_moved.has_moved = True
        if step.promote_to is not None:
            piece_that_moved.promote_to(step.promote_to)
        # whatever was standing on the destination is captured
        self.place_piece(piece_that_moved, step.destination)

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.pieces[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.pieces.pop(square, None)

    def _en_passant_after(self, move: Move) -> Optional[EnPassantTarget]:
        """Only a double pawn step creates an en passant target (for the opponent's next move)."""
        to_square = move.to_square
        if move.piece_type != PieceType.PAWN or move.is_en_passant or to_square is None:
            return None

        from_square = move.from_square
        if abs(to_square.rank - from_square.rank) != 2:
            return None

        skipped = Square(from_square.file, (from_square.rank + to_square.rank) // 2)
        return EnPassantTarget(
            square=skipped, pawn_square=to_square, color=self.pieces[to_square].color
        )
