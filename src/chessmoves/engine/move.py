from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


Square = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    """A request to move the piece on one square to another.

    Attributes:
        from_square (Square): Origin ``(x, y)``.
        to_square (Square): Destination ``(x, y)``.
    """

    from_square: Square
    to_square: Square

    def to_text(self) -> str:
        """Serialize the move as two algebraic squares.

        Returns:
            str: Move encoded like ``"b1c3"``.
        """
        return square_to_str(self.from_square) + square_to_str(self.to_square)


def parse_move(text: str) -> Move:
    """Parse a move string.

    Args:
        text (str): Two algebraic squares, e.g. ``"e2e4"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length or squares.
    """
    if len(text) != 4:
        raise ValueError(f"invalid move length: {text!r}")
    return Move(str_to_square(text[0:2]), str_to_square(text[2:4]))


def str_to_square(s: str) -> Square:
    """Convert algebraic notation into an ``(x, y)`` square.

    The rank digit selects ``x`` and the file letter selects ``y``, so White's
    back rank ``"a1".."h1"`` is ``x == 0``.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        Square: ``(x, y)`` coordinates.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return (int(s[1]) - 1, ord(s[0]) - ord("a"))


def square_to_str(square: Square) -> str:
    """Convert an ``(x, y)`` square into algebraic notation.

    Raises:
        ValueError: If either coordinate is off the board.
    """
    x, y = square
    if not (0 <= x < 8 and 0 <= y < 8):
        raise ValueError(f"invalid square: {square!r}")
    return chr(ord("a") + y) + str(x + 1)
