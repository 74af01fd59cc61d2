"""Orchestration between collaborators (UI, remote players, bots) and the rules engine."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateMatchRequest,
    DeleteMatchRequest,
    GetMatchRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MatchResponse,
    MoveRequest,
    MoveResponse,
)
from src.core.config import Settings
from src.core.exceptions import GameStateError, NotYourTurnError, RepositoryError
from src.core.shared_types import Color, Phase
from src.rules.moves import build_uci
from src.rules.session import GameSession, Player
from src.store.repository import MatchRecord, MatchRepository

logger = logging.getLogger(__name__)


class MatchService:
    """Orchestration of layers for chess matches."""

    def __init__(
        self, repository: MatchRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()

    # -- Collaborator facing logic ---
    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        """Set up the session for the requested variant and play the opening turn."""
        variant = request.variant or self.settings.default_variant
        session = GameSession.for_variant(
            white=Player(request.white_player, Color.WHITE),
            black=Player(request.black_player, Color.BLACK),
            variant=variant,
        )
        record = MatchRecord(variant=variant, session=session)
        match_id = self.repo.create_match(record)
        self._log_phase_changes(match_id, session)

        session.start()
        logger.info("Created %s match %s", variant, match_id)
        return self._create_match_response(match_id, record)

    def get_match(self, request: GetMatchRequest) -> MatchResponse:
        """
        Retrieve current match state.
        ----
        Used in "polling" loop by collaborators to check when it is their turn for instance.
        """
        record = self._fetch_match(request.match_id)
        return self._create_match_response(request.match_id, record)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (UCI) for the player to move."""
        record = self._fetch_match(request.match_id)
        session = record.session
        self._assert_your_turn(session, request.player_name)

        return LegalMovesResponse(
            match_id=request.match_id,
            player_name=request.player_name,
            color=session.board.side_to_move,
            legal_moves=[move.to_uci() for move in session.legal_moves()],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.
        ----

        An illegal (or unknown) move is answered with `accepted=False`, the player simply tries again.
        After an accepted move the next turn is started right away, still holding the session lock.
        """
        record = self._fetch_match(request.match_id)
        session = record.session

        move_uci = build_uci(
            from_square_alg=request.from_square,
            to_square_alg=request.to_square,
            promotion=request.promote_to,
        )
        accepted = session.play(request.player_name, move_uci)
        if not accepted:
            logger.info("Match %s: move %s rejected", request.match_id, move_uci)

        return MoveResponse(
            accepted=accepted,
            match=self._create_match_response(request.match_id, record),
        )

    def list_matches(self) -> list[UUID]:
        return self.repo.list_matches()

    def delete_match(self, request: DeleteMatchRequest) -> None:
        """Handle a request to forget a match."""
        if self.repo.delete_match(request.match_id) is None:
            raise RepositoryError(f"Match with match_id={request.match_id} not found.")
        logger.info("Deleted match %s", request.match_id)

    # -- Internal helpers --
    def _create_match_response(self, match_id: UUID, record: MatchRecord) -> MatchResponse:
        session = record.session
        return MatchResponse(
            match_id=match_id,
            variant=record.variant,
            players={
                color.value: player.name for color, player in session.players.items()
            },
            position=session.board.to_fen(),
            side_to_move=session.board.side_to_move,
            phase=session.phase,
            winner=session.winner.name if session.winner else None,
            move_history=[move.to_uci() for move in session.history],
        )

    def _fetch_match(self, match_id: UUID) -> MatchRecord:
        """Attempt to find the match in the repository and raise error if it fails."""
        record = self.repo.get_match(match_id)
        if record is None:
            raise RepositoryError(f"Match with {match_id=} not found.")
        return record

    def _assert_your_turn(self, session: GameSession, player_name: str) -> None:
        """You must wait for your turn before calculating legal moves / making a move."""
        if session.is_game_over:
            raise GameStateError(f"Match is over. phase: {session.phase}")
        player_to_move = session.player_to_move.name
        if player_name != player_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {player_to_move} to make a move first."
            )

    def _log_phase_changes(self, match_id: UUID, session: GameSession) -> None:
        def _on_phase_changed(phase: Phase) -> None:
            logger.info("Match %s: phase is now %s", match_id, phase)

        session.add_phase_listener(_on_phase_changed)
