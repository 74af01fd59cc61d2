"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Phase, PieceType, Variant

PieceColor = str
PlayerName = str


def _is_algebraic_notation(value: str) -> bool:
    """A letter for the file followed by the rank number (which may have several digits on large boards)"""
    if len(value) < 2:
        return False
    return value[0].isalpha() and value[0].islower() and value[1:].isnumeric()


# --- REQUEST MODELS ---
class CreateMatchRequest(BaseModel):
    white_player: PlayerName
    black_player: PlayerName
    variant: Optional[Variant] = None

    @field_validator("white_player", "black_player")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise InvalidRequestError("Player name cannot be empty.")
        return name


class GetMatchRequest(BaseModel):
    match_id: UUID


class LegalMovesRequest(BaseModel):
    match_id: UUID
    player_name: PlayerName


class MoveRequest(BaseModel):
    match_id: UUID
    player_name: PlayerName
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value in (PieceType.PAWN, PieceType.KING):
            raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
        return value


class DeleteMatchRequest(BaseModel):
    match_id: UUID


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    match_id: UUID
    variant: Variant
    players: dict[PieceColor, PlayerName]
    position: str
    side_to_move: Color
    phase: Phase
    winner: Optional[PlayerName]
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    match_id: UUID
    player_name: PlayerName
    color: Color
    legal_moves: list[str]


class MoveResponse(BaseModel):
    """An illegal move is not an error: `accepted` is False and the match is unchanged."""

    accepted: bool
    match: MatchResponse
