"""
GameSession: the turn orchestrator of a single match.

Binds the two players, the board (produced by a variant's board factory) and the winner together.
Collaborators (UI, remote players, bots, the match service) drive it like this:

    session.start()                 # once, after construction
    while session.begin_turn() == TurnSignal.CONTINUE:
        ... obtain a move for session.board.side_to_move ...
        if not session.submit_move(move):
            ... illegal: ask again (the board is unchanged) ...

Threads sharing a session use `session.play(player_name, uci)` instead, which does the submit and the
next `begin_turn()` under one lock.

Notifications are delivered synchronously, in registration order, and always phase-changed before turn-advanced.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from src.core.exceptions import GameStateError, NotYourTurnError
from src.core.shared_types import TERMINAL_PHASES, Color, Phase, Variant
from src.rules.board import Board
from src.rules.evaluator import update_game_state
from src.rules.legality import is_legal, legal_moves
from src.rules.moves import Move, parse_uci
from src.rules.variants import BoardFactory, board_factory

logger = logging.getLogger(__name__)

PhaseCallback = Callable[[Phase], None]
TurnCallback = Callable[[], None]


class TurnSignal(Enum):
    CONTINUE = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class Player:
    """Opaque handle for a participant. The session only needs it to attribute the win."""

    name: str
    color: Color


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_turn_advanced: list[TurnCallback] = field(default_factory=list)


class GameSession:
    def __init__(
        self, white: Player, black: Player, create_board: BoardFactory
    ) -> None:
        if white.color != Color.WHITE or black.color != Color.BLACK:
            raise GameStateError(
                f"Players must play white and black, got {white.color} and {black.color}"
            )
        self.players: dict[Color, Player] = {Color.WHITE: white, Color.BLACK: black}
        self.board = create_board()
        self.winner: Optional[Player] = None
        self.history: list[Move] = []
        self.events = SessionEvents()
        self._lock = threading.RLock()

    @classmethod
    def for_variant(
        cls, white: Player, black: Player, variant: Variant | str = Variant.CLASSIC
    ) -> Self:
        return cls(white, black, board_factory(variant))

    # -- PROPERTIES --
    @property
    def phase(self) -> Phase:
        return self.board.phase

    @property
    def is_game_over(self) -> bool:
        return self.board.phase in TERMINAL_PHASES

    @property
    def player_to_move(self) -> Player:
        return self.players[self.board.side_to_move]

    def player(self, color: Color) -> Player:
        return self.players[color]

    # -- LISTENERS --
    def add_phase_listener(self, callback: PhaseCallback) -> None:
        self.events.on_phase_changed.append(callback)

    def add_turn_listener(self, callback: TurnCallback) -> None:
        self.events.on_turn_advanced.append(callback)

    # -- TURN LOOP --
    def start(self) -> TurnSignal:
        """Open the game and play the first turn. Only valid on a fresh board."""
        with self._lock:
            if self.board.phase != Phase.NOT_STARTED:
                raise GameStateError(f"Game already started. phase: {self.board.phase}")
            self.board.phase = Phase.STARTED
            logger.info(
                "Game started: %s (white) vs %s (black)",
                self.players[Color.WHITE].name,
                self.players[Color.BLACK].name,
            )
            self._emit_phase(Phase.STARTED)
            return self.begin_turn()

    def update_game_state(self) -> bool:
        """Run the evaluator. On checkmate the player who is NOT to move wins."""
        changed = update_game_state(self.board)
        if self.board.phase == Phase.CHECKMATE:
            self.winner = self.players[self.board.side_to_move.opponent()]
        return changed

    def begin_turn(self) -> TurnSignal:
        """
        Call once after `start()` and once after every accepted move.
        ----

        1. re-classify the position (notify listeners if the phase changed)
        2. checkmate / stalemate? --> GAME_OVER, nothing else happens
        3. otherwise notify that the turn advanced --> CONTINUE
        """
        with self._lock:
            if self.update_game_state():
                self._emit_phase(self.board.phase)

            if self.is_game_over:
                logger.info(
                    "Game over: %s, winner: %s",
                    self.board.phase,
                    self.winner.name if self.winner else None,
                )
                return TurnSignal.GAME_OVER

            self._emit_turn()
            return TurnSignal.CONTINUE

    def submit_move(self, move: Move) -> bool:
        """
        Attempt a move for the side to move.
        -----

        Returns False (board untouched) if the moving piece is not yours, if it is not one of your candidate
        moves, if the move leaves the board, or if it would leave your king attacked.
        Never raises for an illegal move.
        """
        with self._lock:
            self._assert_in_progress()

            moving_piece = self.board.piece(move.from_square)
            if moving_piece is None or moving_piece.color != self.board.side_to_move:
                logger.debug(
                    "Rejected move from %s: no %s piece there",
                    move.from_square.to_algebraic(),
                    self.board.side_to_move,
                )
                return False

            if move not in self.board.generate_candidate_moves(self.board.side_to_move):
                logger.debug(
                    "Rejected move from %s: not a candidate move",
                    move.from_square.to_algebraic(),
                )
                return False

            if not is_legal(move, self.board):
                return False

            self.board.execute_move(move)
            self.history.append(move)
            logger.info("Accepted move %s", move.to_uci())
            return True

    def play(self, player_name: str, uci: str) -> bool:
        """
        Turn check, move lookup, submit and the next `begin_turn()` under a single lock acquisition.
        ---

        For collaborators sharing the session between threads: nobody else can move in between
        the accepted move and the start of the opponent's turn.
        Returns whether the move was accepted.
        """
        with self._lock:
            self._assert_in_progress()
            player_to_move = self.player_to_move.name
            if player_name != player_to_move:
                raise NotYourTurnError(
                    f"It is not your turn. Waiting for player {player_to_move} to make a move first."
                )

            move = self.find_move(uci)
            if move is None or not self.submit_move(move):
                return False
            self.begin_turn()
            return True

    # -- HELPERS FOR COLLABORATORS --
    def legal_moves(self) -> list[Move]:
        with self._lock:
            return legal_moves(self.board)

    def find_move(self, uci: str) -> Optional[Move]:
        """
        Match UCI text against the candidate moves of the side to move (legality is NOT checked here,
        that is up to `submit_move`).
        """
        from_square, to_square, promote_to = parse_uci(uci)
        with self._lock:
            return next(
                (
                    move
                    for move in self.board.generate_candidate_moves(self.board.side_to_move)
                    if move.from_square == from_square
                    and move.to_square == to_square
                    and move.promote_to == promote_to
                ),
                None,
            )

    # -- PRIVATE HELPERS --
    def _assert_in_progress(self) -> None:
        if self.board.phase == Phase.NOT_STARTED:
            raise GameStateError("Game has not started yet.")
        if self.is_game_over:
            raise GameStateError(f"Game is over. phase: {self.board.phase}")

    def _emit_phase(self, phase: Phase) -> None:
        for callback in self.events.on_phase_changed:
            callback(phase)

    def _emit_turn(self) -> None:
        for callback in self.events.on_turn_advanced:
            callback()
