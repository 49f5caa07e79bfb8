"""
The turn state machine: whose turn it is, the pending promotion choice, the bonus turn after a super effective hit and the winner.

`ChessState.move_piece()` and `ChessState.select_pawn_promotion_piece()` are the only ways to change a game in progress.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional, Self

from typechess.chess.affinity import Interaction
from typechess.chess.board import Board
from typechess.chess.moves import Move
from typechess.chess.pieces import Color
from typechess.chess.square import Square
from typechess.core.exceptions import PromotionNotPendingError
from typechess.core.shared_types import InfoMessage, Status, Winner

logger = logging.getLogger(__name__)


@dataclass
class ChessState:
    board: Board
    player: Color = Color.WHITE
    winner: Winner = Winner.NONE_YET
    info_message: Optional[InfoMessage] = None
    # promotion gate: a pawn reached the final rank and waits for the player to pick a piece
    require_piece_selection: bool = False
    turn_count: int = 0

    @classmethod
    def new(cls, rng: Optional[random.Random] = None) -> Self:
        return cls(board=Board.starting_position(rng))

    @property
    def status(self) -> Status:
        if self.winner != Winner.NONE_YET:
            return Status.GAME_OVER
        if self.require_piece_selection:
            return Status.AWAITING_PROMOTION_CHOICE
        return Status.AWAITING_MOVE

    # --- MOVES ---
    def get_valid_moves(self, square: Square) -> list[Move]:
        """
        The moves the current player can make with the piece on the square.
        ---

        On top of the movement rules (and the bonus turn restriction, see Board), a move may not leave your own king in check.
        Once the game has a winner, nothing can be moved anymore.
        """
        if self.winner != Winner.NONE_YET:
            return []
        return self._legal_moves_from(square)

    def move_piece(self, from_square: Square, to_square: Square) -> bool:
        """
        Attempt to make a move
        -----

        Returns False (and changes nothing) when the move cannot be made right now:
        a promotion choice is pending, the game is over, or the move is not among the valid moves of the current player.

        Otherwise, after the board executed the move, in this order:
        1. promotion gate: a pawn that arrived (and survived) on the final rank waits for a piece choice. The player does not change.
        2. extra turn: after a super effective hit the same player continues, if the piece that hit has any valid moves left.
        3. in any other case, the turn passes to the opponent.

        Then the info message and the winner (seen from the player now on turn) are updated.
        """
        if self.require_piece_selection:
            logger.debug("Move rejected: waiting for a promotion choice.")
            return False
        if self.winner != Winner.NONE_YET:
            logger.debug(f"Move rejected: game is over. winner: {self.winner}")
            return False
        if not any(move.to_square == to_square for move in self.get_valid_moves(from_square)):
            logger.debug(
                f"Move rejected: {from_square.to_algebraic()}{to_square.to_algebraic()} is not valid for {self.player.value}"
            )
            return False

        self.board = self.board.execute_move(from_square, to_square)
        interaction = self.board.last_move_interaction()

        if self.board.requires_pawn_promotion():
            self.require_piece_selection = True
            # the bonus turn is decided by the promoted piece, once it is chosen
            self.info_message = self.info_message_for(interaction, moves_available=True)
        else:
            has_follow_up = self._has_follow_up_moves(interaction, to_square)
            if not has_follow_up:
                self.player = self.player.opponent
            self.info_message = self.info_message_for(interaction, has_follow_up)
        self._update_winner()
        self.turn_count += 1

        logger.info(
            f"{from_square.to_algebraic()}{to_square.to_algebraic()} played ({interaction.value}). "
            f"turn {self.turn_count}, {self.player.value} to move, status: {self.status}"
        )
        return True

    def select_pawn_promotion_piece(self, kind: str) -> None:
        """
        Pick the piece the pawn on the final rank turns into ('queen', 'rook', 'bishop', 'knight' or 'pawn').

        Closes the promotion gate. The turn passes to the opponent,
        unless the pawn got there with a super effective hit and the promoted piece can move again (bonus turn).
        """
        if not self.require_piece_selection:
            raise PromotionNotPendingError("There is no pawn waiting for promotion.")

        self.board.select_pawn_promotion_piece(kind, self.player)
        self.require_piece_selection = False

        last_move = self.board.history.last_move()
        interaction = self.board.last_move_interaction()
        # for the typechecker: the gate only opens after a move
        assert last_move is not None
        has_follow_up = self._has_follow_up_moves(interaction, last_move.to_square)
        if not has_follow_up:
            self.player = self.player.opponent

        self.info_message = self.info_message_for(interaction, has_follow_up)
        self._update_winner()
        logger.info(f"Pawn promoted to {kind}. {self.player.value} to move, status: {self.status}")

    @staticmethod
    def info_message_for(interaction: Interaction, moves_available: bool) -> Optional[InfoMessage]:
        match interaction:
            case Interaction.SUPER_EFFECTIVE if moves_available:
                return InfoMessage.SUPER_EFFECTIVE
            case Interaction.SUPER_EFFECTIVE:
                return InfoMessage.SUPER_EFFECTIVE_NO_MOVES
            case Interaction.NOT_VERY_EFFECTIVE:
                return InfoMessage.NOT_VERY_EFFECTIVE
            case Interaction.NO_EFFECT:
                return InfoMessage.NO_EFFECT
            case _:
                return None

    # --- PRIVATE HELPERS ---
    def _legal_moves_from(self, square: Square) -> list[Move]:
        return [
            move
            for move in self.board.possible_moves_for_piece(square, self.player)
            if not self._leaves_king_in_check(move)
        ]

    def _leaves_king_in_check(self, move: Move) -> bool:
        """Play the move on a copy of the board and look at your own king"""
        board = self.board.execute_move(move.from_square, move.to_square)
        return board.is_king_in_check(self.player)

    def _has_follow_up_moves(self, interaction: Interaction, square: Square) -> bool:
        """Bonus turn rule: only after a super effective hit, and only if the piece that hit can still go somewhere"""
        if interaction != Interaction.SUPER_EFFECTIVE:
            return False
        return bool(self._legal_moves_from(square))

    def _update_winner(self) -> None:
        self.winner = self.board.get_winner(self.player)
        if self.winner != Winner.NONE_YET:
            # nothing left to choose in a finished game
            self.require_piece_selection = False
            logger.info(f"Game over. winner: {self.winner}")

    # --- ENCODING ---
    def to_dict(self) -> dict[str, Any]:
        return {
            "board": self.board.to_dict(),
            "player": self.player.value,
            "winner": self.winner.value,
            "info_message": self.info_message.value if self.info_message else None,
            "require_piece_selection": self.require_piece_selection,
            "turn_count": self.turn_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        info_message = data.get("info_message")
        return cls(
            board=Board.from_dict(data["board"]),
            player=Color(data["player"]),
            winner=Winner(data["winner"]),
            info_message=InfoMessage(info_message) if info_message else None,
            require_piece_selection=data["require_piece_selection"],
            turn_count=data["turn_count"],
        )
