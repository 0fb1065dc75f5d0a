from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

if TYPE_CHECKING:
    from .pieces import PieceColor, PieceType


@dataclass(frozen=True)
class Turn:
    """A completed move, as recorded after it was played."""

    color: PieceColor
    piece_type: PieceType
    from_x: int
    from_y: int
    to_x: int
    to_y: int

    def __str__(self) -> str:
        return (
            f"{self.color.value}{self.piece_type.value} "
            f"{self.from_x}:{self.from_y} -> {self.to_x}:{self.to_y}"
        )


@dataclass
class History:
    """Append-only record of completed turns."""

    turns: List[Turn] = field(default_factory=list)

    def append(self, turn: Turn) -> None:
        self.turns.append(turn)

    def last(self) -> Optional[Turn]:
        return self.turns[-1] if self.turns else None

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)
