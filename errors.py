# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Exceptions raised by the game engine and service.

Each error carries a machine-readable ``error_code`` that the HTTP layer
copies into its error envelope.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all game errors."""

    error_code = "GAME_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class GameValidationError(GameError):
    """Raised when creation or lineup input is malformed."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None,
                 details: list[str] | None = None):
        self.details = details or []
        super().__init__(message, field=field)


class GameNotFoundError(GameError):
    """Raised when no game exists for an identifier."""

    error_code = "GAME_NOT_FOUND"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game not found: {game_id}", field="game_id")


class InvalidGameStateError(GameError):
    """Raised when an action breaks the rules for the game's current state."""

    error_code = "INVALID_GAME_STATE"
