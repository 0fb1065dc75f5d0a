from __future__ import annotations

from .game import Game


def perft(game: Game, depth: int) -> int:
    """Count pseudo-legal move sequences of length ``depth`` from ``game``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all child positions' perft(depth-1).
    - A finished game (king captured) has no children.

    Moves may leave the mover's king attacked, so counts exceed standard
    perft tables once checks become possible.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in game.pseudo_legal_moves():
        child = game.copy()
        child.apply_move(m)
        nodes += perft(child, depth - 1)
    return nodes
