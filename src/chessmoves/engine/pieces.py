from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .history import History
from .move import Square


FIELD_SIZE = 8
KILL_ENERGY = 10
MAX_ENERGY = 255


class PieceColor(Enum):
    WHITE = "w"
    BLACK = "b"

    def opposite(self) -> "PieceColor":
        return PieceColor.BLACK if self is PieceColor.WHITE else PieceColor.WHITE


class PieceType(Enum):
    KING = "K"
    QUEEN = "Q"
    BISHOP = "B"
    KNIGHT = "k"
    ROOK = "R"
    PAWN = "p"


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    Attributes:
        color (PieceColor): Owner of the piece.
        piece_type (PieceType): Kind of piece.
        x (int): Rank coordinate, the axis pawns advance along (0..7).
        y (int): File coordinate (0..7).
        energy (int): Energy collected by capturing; ignored by move generation.
    """

    color: PieceColor
    piece_type: PieceType
    x: int
    y: int
    energy: int = 0

    @property
    def square(self) -> Square:
        return (self.x, self.y)


@dataclass(frozen=True)
class MoveRules:
    """Switches for the two places where generation may ignore blockers.

    Attributes:
        rays_stop_at_blockers (bool): End a sliding ray at the first occupied
            square. When False, rays keep offering squares behind pieces.
        double_push_needs_clear_path (bool): Require the square a pawn passes
            over on its double push to be empty.
    """

    rays_stop_at_blockers: bool = True
    double_push_needs_clear_path: bool = True


STANDARD_RULES = MoveRules()
SEE_THROUGH_RULES = MoveRules(rays_stop_at_blockers=False, double_push_needs_clear_path=False)

RULES_BY_NAME: Dict[str, MoveRules] = {
    "standard": STANDARD_RULES,
    "see_through": SEE_THROUGH_RULES,
}

ORTHOGONAL_DIRS = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONAL_DIRS = [(1, 1), (1, -1), (-1, -1), (-1, 1)]
KNIGHT_OFFSETS = [(1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2)]
KING_OFFSETS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)]


def checked_offset(coord: int, delta: int) -> Optional[int]:
    """Shift a board coordinate, or return None when it leaves the board."""
    res = coord + delta
    if res < 0 or res >= FIELD_SIZE:
        return None
    return res


def color_of_square(square: Square, pieces: Iterable[Piece]) -> Optional[PieceColor]:
    """Return the color of the piece on ``square``, or None if it is empty."""
    for piece in pieces:
        if piece.x == square[0] and piece.y == square[1]:
            return piece.color
    return None


def _offset_square(this: Piece, dx: int, dy: int) -> Optional[Square]:
    x = checked_offset(this.x, dx)
    if x is None:
        return None
    y = checked_offset(this.y, dy)
    if y is None:
        return None
    return (x, y)


def _try_move(poss: List[Square], this: Piece, pieces: Sequence[Piece], dx: int, dy: int) -> None:
    target = _offset_square(this, dx, dy)
    if target is None:
        return
    if color_of_square(target, pieces) == this.color:
        return
    poss.append(target)


def _slide(
    poss: List[Square],
    this: Piece,
    pieces: Sequence[Piece],
    dirs: Iterable[Tuple[int, int]],
    rules: MoveRules,
) -> None:
    for ddx, ddy in dirs:
        for step in range(1, FIELD_SIZE + 1):
            target = _offset_square(this, ddx * step, ddy * step)
            if target is None:
                # Later steps along this ray are off the board too
                break
            occupant = color_of_square(target, pieces)
            if occupant != this.color:
                poss.append(target)
            if occupant is not None and rules.rays_stop_at_blockers:
                break


def _rook(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    _slide(poss, this, pieces, ORTHOGONAL_DIRS, rules)


def _bishop(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    _slide(poss, this, pieces, DIAGONAL_DIRS, rules)


def _queen(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    _rook(poss, this, pieces, history, rules)
    _bishop(poss, this, pieces, history, rules)


def _knight(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    for dx, dy in KNIGHT_OFFSETS:
        _try_move(poss, this, pieces, dx, dy)


def _king(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    # No attacked-square filtering: the king may step into check
    for dx, dy in KING_OFFSETS:
        _try_move(poss, this, pieces, dx, dy)


def pawn_direction(color: PieceColor) -> int:
    return 1 if color is PieceColor.WHITE else -1


def pawn_start_rank(color: PieceColor) -> int:
    return 1 if color is PieceColor.WHITE else FIELD_SIZE - 2


def _pawn_push(poss: List[Square], this: Piece, pieces: Sequence[Piece], dx: int) -> bool:
    x = checked_offset(this.x, dx)
    if x is None:
        return False
    if color_of_square((x, this.y), pieces) is not None:
        return False
    poss.append((x, this.y))
    return True


def _pawn_capture(poss: List[Square], this: Piece, pieces: Sequence[Piece], dx: int, dy: int) -> None:
    target = _offset_square(this, dx, dy)
    if target is None:
        return
    if color_of_square(target, pieces) != this.color.opposite():
        return
    poss.append(target)


def en_passant_target(this: Piece, history: History) -> Optional[Square]:
    """Return the square ``this`` pawn may capture en passant onto, if any.

    Eligibility is derived from the last recorded turn only: it must be an
    opponent pawn double step that landed directly beside this pawn.
    """
    if this.piece_type is not PieceType.PAWN:
        return None
    last = history.last()
    if last is None:
        return None
    if last.color is not this.color.opposite():
        return None
    if last.piece_type is not PieceType.PAWN:
        return None
    if abs(last.to_x - last.from_x) != 2:
        return None
    if last.to_x != this.x:
        return None
    if abs(last.to_y - this.y) != 1:
        return None
    x = checked_offset(this.x, pawn_direction(this.color))
    if x is None:
        return None
    return (x, last.to_y)


def _pawn(poss: List[Square], this: Piece, pieces: Sequence[Piece], history: History, rules: MoveRules) -> None:
    direction = pawn_direction(this.color)
    pushed = _pawn_push(poss, this, pieces, direction)
    _pawn_capture(poss, this, pieces, direction, -1)
    _pawn_capture(poss, this, pieces, direction, 1)
    if this.x == pawn_start_rank(this.color) and (pushed or not rules.double_push_needs_clear_path):
        _pawn_push(poss, this, pieces, 2 * direction)
    ep = en_passant_target(this, history)
    if ep is not None:
        # Added without an occupancy check, the captured pawn is beside the target
        poss.append(ep)


Generator = Callable[[List[Square], Piece, Sequence[Piece], History, MoveRules], None]

GENERATORS: Dict[PieceType, Generator] = {
    PieceType.KING: _king,
    PieceType.QUEEN: _queen,
    PieceType.BISHOP: _bishop,
    PieceType.KNIGHT: _knight,
    PieceType.ROOK: _rook,
    PieceType.PAWN: _pawn,
}


def valid_positions(
    piece: Piece,
    pieces: Sequence[Piece],
    history: Optional[History] = None,
    rules: MoveRules = STANDARD_RULES,
) -> List[Square]:
    """Generate pseudo-legal destination squares for ``piece``.

    Args:
        piece (Piece): Piece to move.
        pieces (Sequence[Piece]): Snapshot of every piece on the board,
            ``piece`` included.
        history (Optional[History]): Completed turns; only the last one is
            read, for en passant.
        rules (MoveRules): Blocking behavior for rays and double pushes.

    Returns:
        List[Square]: Destination ``(x, y)`` squares. Order carries no meaning.
    """
    poss: List[Square] = []
    GENERATORS[piece.piece_type](poss, piece, pieces, history or History(), rules)
    return poss


def is_move_valid(
    piece: Piece,
    target: Square,
    pieces: Sequence[Piece],
    history: Optional[History] = None,
    rules: MoveRules = STANDARD_RULES,
) -> bool:
    """Return whether ``piece`` may move onto ``target``."""
    if color_of_square(target, pieces) == piece.color:
        return False
    return tuple(target) in valid_positions(piece, pieces, history, rules)


def capture_square(
    piece: Piece,
    target: Square,
    pieces: Sequence[Piece],
    history: Optional[History] = None,
) -> Optional[Square]:
    """Return the square of the piece removed when ``piece`` moves to ``target``.

    Ordinary captures remove the enemy on ``target``. An en passant capture
    removes the pawn that just passed, which stands beside the mover.
    """
    if color_of_square(target, pieces) == piece.color.opposite():
        return (target[0], target[1])
    ep = en_passant_target(piece, history or History())
    if ep is not None and ep == tuple(target):
        return (piece.x, target[1])
    return None
