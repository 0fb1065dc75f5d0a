from __future__ import annotations

import argparse
import logging
import os
import time
from typing import List, Optional

import uvicorn

from ..engine.game import Game
from ..engine.move import square_to_str, str_to_square
from ..engine.perft import perft
from ..engine.pieces import RULES_BY_NAME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chessmoves", description="Pseudo-legal chess move generator")
    parser.add_argument(
        "--rules",
        choices=sorted(RULES_BY_NAME),
        default=os.environ.get("CHESSMOVES_RULES", "standard"),
        help="Blocking behavior for rays and double pawn pushes (default: standard)",
    )
    parser.add_argument("--log-level", default="info", help="Logging level (default: info)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=os.environ.get("CHESSMOVES_HOST", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=int(os.environ.get("CHESSMOVES_PORT", "8000")))

    moves = sub.add_parser("moves", help="List destinations for a square of the start position")
    moves.add_argument("square", help="Algebraic square, e.g. b1")

    p = sub.add_parser("perft", help="Count pseudo-legal move sequences from the start position")
    p.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.command == "serve":
        # The app factory reads its default rules from the environment
        os.environ["CHESSMOVES_RULES"] = args.rules
        uvicorn.run(
            "chessmoves.protocol.http.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
        return 0

    game = Game.new(RULES_BY_NAME[args.rules])
    if args.command == "moves":
        try:
            targets = game.valid_positions_from(str_to_square(args.square))
        except ValueError as e:
            print(f"error: {e}")
            return 2
        print(" ".join(square_to_str(t) for t in targets))
        return 0

    start = time.perf_counter()
    nodes = perft(game, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
