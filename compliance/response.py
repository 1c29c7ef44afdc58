# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Response envelopes for the compliance API.

Every route in ``app.py`` returns one of two bodies through ``jsonify``:
``{"status": "ok", "operation", "data"}`` on success, or
``{"status": "error", "operation", "error_code", "message"}`` on failure.
The HTTP status carries the error class and ``error_code`` names the cause:

    INVALID_PARAMETER   400  request body failed input validation
    GAME_NOT_FOUND      404  no saved game with that id
    PLAYER_NOT_FOUND    404  no saved game mentions that player
    NO_APPLICABLE_RULE  422  age or pitch count outside the rest-day table

Violations are never errors. A game that breaks a rule still saves and is
returned with ``status: ok`` and ``has_violation: true``.
"""

from typing import Any

INVALID_PARAMETER = "INVALID_PARAMETER"
GAME_NOT_FOUND = "GAME_NOT_FOUND"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
NO_APPLICABLE_RULE = "NO_APPLICABLE_RULE"


def success_response(operation: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"status": "ok", "operation": operation, "data": data}


def error_response(operation: str, error_code: str, message: str) -> dict[str, Any]:
    return {
        "status": "error",
        "operation": operation,
        "error_code": error_code,
        "message": message,
    }


def unavailable(explanation: str) -> dict[str, Any]:
    """Placeholder for a value that cannot be computed, such as a next
    eligible date for an age outside the policy table. The key stays in
    the payload so clients can show the explanation."""
    return {"value": None, "explanation": explanation}
