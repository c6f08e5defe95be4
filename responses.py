# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Structured API response helpers.

Every HTTP response body follows the same top-level structure:

  Success:
    {
      "success": true,
      "message": "Human-readable summary",
      "game": { ... },          # when the call concerns one game
      "result": "SINGLE"        # when the call produced an outcome
    }

  Error:
    {
      "success": false,
      "error_code": "<ERROR_CODE>",
      "message": "Human-readable error description",
      "details": [ ... ]
    }
"""

from typing import Any

from errors import GameError

# HTTP status per error code
STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "GAME_NOT_FOUND": 404,
    "INVALID_GAME_STATE": 409,
}


def success_response(message: str, game: dict[str, Any] | None = None,
                     **extra: Any) -> dict[str, Any]:
    """Build a structured success response.

    Args:
        message: Summary of what happened.
        game: Serialized game state, if the call concerns one game.
        **extra: Additional top-level fields (e.g. ``result``, ``stats``).

    Returns:
        Dict ready for ``jsonify``.
    """
    body: dict[str, Any] = {"success": True, "message": message}
    if game is not None:
        body["game"] = game
    body.update(extra)
    return body


def error_response(error_code: str, message: str,
                   details: list[str] | None = None) -> dict[str, Any]:
    """Build a structured error response.

    Args:
        error_code: Machine-readable error code (e.g., GAME_NOT_FOUND).
        message: Human-readable error description.
        details: Optional list of specific problems.

    Returns:
        Dict with consistent error structure.
    """
    return {
        "success": False,
        "error_code": error_code,
        "message": message,
        "details": details or [],
    }


def game_error_response(exc: GameError) -> tuple[dict[str, Any], int]:
    """Map a GameError to an error body and its HTTP status."""
    details = getattr(exc, "details", None)
    status = STATUS_BY_ERROR_CODE.get(exc.error_code, 400)
    return error_response(exc.error_code, exc.message, details), status
