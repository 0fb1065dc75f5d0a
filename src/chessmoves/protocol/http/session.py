from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from ...engine.game import Game


class InMemorySessionStore:
    """Thread-safe in-memory store of running games keyed by ``game_id``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}

    def create(self, game: Game) -> str:
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = game
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def delete(self, game_id: str) -> bool:
        """Drop a session; returns False when it did not exist."""
        with self._lock:
            return self._games.pop(game_id, None) is not None
