from __future__ import annotations

import logging
import os
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.game import Game
from ...engine.move import parse_move, square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.pieces import RULES_BY_NAME, Piece
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

RulesName = Literal["standard", "see_through"]


class CreateGameRequest(BaseModel):
    rules: Optional[RulesName] = Field(
        default=None, description="Blocking behavior, server default when omitted"
    )


class MoveRequest(BaseModel):
    move: str = Field(..., description="Origin and destination squares, e.g. b1c3")


class PerftRequest(BaseModel):
    depth: int = Field(default=1, ge=0, le=4)
    rules: Optional[RulesName] = None


class PieceModel(BaseModel):
    color: str
    piece_type: str
    square: str
    energy: int


class GameState(BaseModel):
    game_id: str
    side_to_move: str
    pieces: List[PieceModel]
    movable: List[str]
    last_turn: Optional[str]
    history: List[str]
    winner: Optional[str]


class MovesResponse(BaseModel):
    square: str
    piece_type: str
    destinations: List[str]


def create_app(default_rules: Optional[str] = None) -> FastAPI:
    if default_rules is None:
        default_rules = os.environ.get("CHESSMOVES_RULES", "standard")
    if default_rules not in RULES_BY_NAME:
        raise ValueError(f"unknown rules: {default_rules!r}")

    app = FastAPI(title="Chess Moves API", version="0.1.0")

    logging.basicConfig(level=logging.INFO)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game(req: Optional[CreateGameRequest] = None) -> GameState:
        rules = req.rules if req is not None and req.rules is not None else default_rules
        game_id = store.create(Game.new(RULES_BY_NAME[rules]))
        logger.info("created game %s with %s rules", game_id, rules)
        return _state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=MovesResponse)
    async def get_moves(game_id: str, square: str) -> MovesResponse:
        game = _require_game(store, game_id)
        try:
            sq = str_to_square(square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        piece = game.piece_at(sq)
        if piece is None:
            raise HTTPException(status_code=400, detail=f"no piece on {square}")
        return MovesResponse(
            square=square,
            piece_type=piece.piece_type.name.lower(),
            destinations=[square_to_str(t) for t in game.valid_positions_from(sq)],
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            game.apply_move(move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        rules = req.rules if req.rules is not None else default_rules
        nodes = perft_nodes(Game.new(RULES_BY_NAME[rules]), req.depth)
        return {"depth": req.depth, "nodes": nodes}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _piece_model(piece: Piece) -> PieceModel:
    return PieceModel(
        color=piece.color.name.lower(),
        piece_type=piece.piece_type.name.lower(),
        square=square_to_str(piece.square),
        energy=piece.energy,
    )


def _state(game_id: str, game: Game) -> GameState:
    history = game.move_history_text()
    return GameState(
        game_id=game_id,
        side_to_move=game.side_to_move.name.lower(),
        pieces=[_piece_model(p) for p in game.pieces],
        movable=[] if game.is_over else [square_to_str(s) for s in game.movable_pieces()],
        last_turn=history[-1] if history else None,
        history=history,
        winner=game.winner.name.lower() if game.winner is not None else None,
    )
