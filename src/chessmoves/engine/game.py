from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional

from .history import History, Turn
from .move import Move, Square, square_to_str
from .pieces import (
    KILL_ENERGY,
    MAX_ENERGY,
    STANDARD_RULES,
    MoveRules,
    Piece,
    PieceColor,
    PieceType,
    capture_square,
    is_move_valid,
    valid_positions,
)


logger = logging.getLogger(__name__)


BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def starting_pieces() -> List[Piece]:
    pieces: List[Piece] = []
    for color, back, pawns in ((PieceColor.WHITE, 0, 1), (PieceColor.BLACK, 7, 6)):
        for y, piece_type in enumerate(BACK_RANK):
            pieces.append(Piece(color, piece_type, back, y))
        for y in range(8):
            pieces.append(Piece(color, PieceType.PAWN, pawns, y))
    return pieces


@dataclass
class Game:
    """Game wrapper owning pieces, side to move and history.

    Responsibility: hand board snapshots to the move generator, apply moves,
    remove captured pieces and record turns.
    """

    pieces: List[Piece]
    side_to_move: PieceColor = PieceColor.WHITE
    history: History = field(default_factory=History)
    rules: MoveRules = STANDARD_RULES
    winner: Optional[PieceColor] = None

    @classmethod
    def new(cls, rules: MoveRules = STANDARD_RULES) -> "Game":
        return cls(pieces=starting_pieces(), rules=rules)

    @classmethod
    def from_pieces(
        cls,
        pieces: Iterable[Piece],
        side_to_move: PieceColor = PieceColor.WHITE,
        history: Optional[History] = None,
        rules: MoveRules = STANDARD_RULES,
    ) -> "Game":
        return cls(
            pieces=list(pieces),
            side_to_move=side_to_move,
            history=history if history is not None else History(),
            rules=rules,
        )

    def copy(self) -> "Game":
        return Game(
            pieces=list(self.pieces),
            side_to_move=self.side_to_move,
            history=History(list(self.history.turns)),
            rules=self.rules,
            winner=self.winner,
        )

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def piece_at(self, square: Square) -> Optional[Piece]:
        for piece in self.pieces:
            if piece.square == tuple(square):
                return piece
        return None

    def pieces_of(self, color: PieceColor) -> List[Piece]:
        return [p for p in self.pieces if p.color is color]

    def valid_positions_from(self, square: Square) -> List[Square]:
        piece = self.piece_at(square)
        if piece is None:
            raise ValueError(f"no piece on {square_to_str(square)}")
        return valid_positions(piece, self.pieces, self.history, self.rules)

    def movable_pieces(self) -> List[Square]:
        return [
            p.square
            for p in self.pieces_of(self.side_to_move)
            if valid_positions(p, self.pieces, self.history, self.rules)
        ]

    def pseudo_legal_moves(self) -> List[Move]:
        if self.is_over:
            return []
        moves: List[Move] = []
        for piece in self.pieces_of(self.side_to_move):
            for target in valid_positions(piece, self.pieces, self.history, self.rules):
                moves.append(Move(piece.square, target))
        return moves

    def apply_move(self, move: Move) -> Optional[Piece]:
        """Play ``move`` for the side to move.

        Returns:
            Optional[Piece]: The captured piece, if any.

        Raises:
            ValueError: If the game is over, the origin holds no piece of the
                side to move, or the destination is not reachable.
        """
        if self.is_over:
            raise ValueError("game is over")
        mover = self.piece_at(move.from_square)
        if mover is None:
            raise ValueError(f"no piece on {square_to_str(move.from_square)}")
        if mover.color is not self.side_to_move:
            raise ValueError("not this side's turn")
        if not is_move_valid(mover, move.to_square, self.pieces, self.history, self.rules):
            raise ValueError("illegal move")

        taken_sq = capture_square(mover, move.to_square, self.pieces, self.history)
        taken = self.piece_at(taken_sq) if taken_sq is not None else None
        energy = mover.energy
        if taken is not None:
            self.pieces.remove(taken)
            energy = min(energy + KILL_ENERGY, MAX_ENERGY)

        to_x, to_y = move.to_square
        self.pieces[self.pieces.index(mover)] = replace(mover, x=to_x, y=to_y, energy=energy)
        turn = Turn(
            color=mover.color,
            piece_type=mover.piece_type,
            from_x=mover.x,
            from_y=mover.y,
            to_x=to_x,
            to_y=to_y,
        )
        self.history.append(turn)
        self.side_to_move = self.side_to_move.opposite()
        logger.debug("applied %s", turn)

        if taken is not None and taken.piece_type is PieceType.KING:
            self.winner = mover.color
            logger.info("%s won by capturing the king", mover.color.name.lower())
        return taken

    def move_history_text(self) -> List[str]:
        return [str(t) for t in self.history]
