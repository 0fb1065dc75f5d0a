from __future__ import annotations

from chessmoves.engine.pieces import Piece, PieceColor, PieceType, valid_positions

W, B = PieceColor.WHITE, PieceColor.BLACK


def test_knight_in_center_has_eight_moves() -> None:
    for x in range(2, 6):
        for y in range(2, 6):
            knight = Piece(W, PieceType.KNIGHT, x, y)
            poss = valid_positions(knight, [knight])
            assert len(poss) == 8
            for tx, ty in poss:
                assert 0 <= tx < 8 and 0 <= ty < 8
                assert {abs(tx - x), abs(ty - y)} == {1, 2}


def test_knight_in_corner() -> None:
    knight = Piece(W, PieceType.KNIGHT, 0, 0)
    assert sorted(valid_positions(knight, [knight])) == [(1, 2), (2, 1)]


def test_knight_jumps_and_respects_own_pieces() -> None:
    knight = Piece(W, PieceType.KNIGHT, 3, 3)
    pieces = [
        knight,
        # Surrounding pieces do not block a knight
        Piece(W, PieceType.PAWN, 3, 4),
        Piece(W, PieceType.PAWN, 4, 3),
        Piece(W, PieceType.ROOK, 5, 4),
        Piece(B, PieceType.ROOK, 1, 2),
    ]
    poss = set(valid_positions(knight, pieces))
    assert (5, 4) not in poss
    assert (1, 2) in poss
    assert len(poss) == 7


def test_king_moves_center_and_corner() -> None:
    king = Piece(W, PieceType.KING, 3, 3)
    poss = valid_positions(king, [king])
    assert len(poss) == 8
    assert (3, 3) not in poss

    corner = Piece(B, PieceType.KING, 0, 0)
    assert sorted(valid_positions(corner, [corner])) == [(0, 1), (1, 0), (1, 1)]


def test_king_may_step_next_to_enemy_and_capture() -> None:
    king = Piece(W, PieceType.KING, 0, 4)
    pieces = [
        king,
        Piece(W, PieceType.QUEEN, 0, 3),
        Piece(B, PieceType.PAWN, 1, 4),
        # Square attacked by this rook is still offered
        Piece(B, PieceType.ROOK, 7, 5),
    ]
    poss = set(valid_positions(king, pieces))
    assert (0, 3) not in poss
    assert (1, 4) in poss
    assert (0, 5) in poss and (1, 5) in poss
