# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""In-process keyed store for active games.

Usage::

    store = GameSessionStore()
    store.put(state)
    with store.session(state.game_id) as game:
        ...                                  # exclusive access to this game
    store.delete(state.game_id)

Each game id has its own lock, so callers racing on one game are serialised
while operations on different games run independently. The registry lock
only guards the dicts and is never held while a session is open.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from errors import GameNotFoundError
from simulation import GameState

logger = logging.getLogger(__name__)


class GameSessionStore:
    """Thread-safe get/put/delete of GameState by game id."""

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._games: dict[str, GameState] = {}
        self._locks: dict[str, threading.Lock] = {}

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        with self._registry_lock:
            return game_id in self._games

    def get(self, game_id: str) -> GameState:
        """Return the stored state. Raises GameNotFoundError."""
        with self._registry_lock:
            state = self._games.get(game_id)
        if state is None:
            raise GameNotFoundError(game_id)
        return state

    def put(self, state: GameState) -> None:
        with self._registry_lock:
            self._games[state.game_id] = state
            self._locks.setdefault(state.game_id, threading.Lock())

    def delete(self, game_id: str) -> None:
        """Remove a game. Raises GameNotFoundError."""
        lock = self._lock_for(game_id)
        with lock:
            with self._registry_lock:
                if self._games.pop(game_id, None) is None:
                    raise GameNotFoundError(game_id)
                self._locks.pop(game_id, None)
        logger.info("Deleted game %s", game_id)

    def clear(self) -> None:
        with self._registry_lock:
            self._games.clear()
            self._locks.clear()

    def _lock_for(self, game_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(game_id)
        if lock is None:
            raise GameNotFoundError(game_id)
        return lock

    @contextmanager
    def session(self, game_id: str) -> Iterator[GameState]:
        """Hold the game's lock and yield its state for one operation."""
        lock = self._lock_for(game_id)
        with lock:
            # Deleted while we were waiting on the lock
            state = self.get(game_id)
            yield state
