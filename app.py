# /// script
# requires-python = ">=3.12"
# dependencies = ["flask>=3.0", "pydantic>=2.0"]
# ///
"""JSON API for the youth pitch compliance engine.

Exposes the policy table, on-demand game evaluation, the rest-day
calculator, and the save/review workflow for games.

Usage:
    uv run app.py
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from pydantic import ValidationError

import config
from compliance.aggregator import evaluate_lines
from compliance.age_policy import policy_table
from compliance.pitch_count import official_pitch_count
from compliance.response import (
    GAME_NOT_FOUND,
    INVALID_PARAMETER,
    NO_APPLICABLE_RULE,
    PLAYER_NOT_FOUND,
    error_response,
    success_response,
    unavailable,
)
from compliance.rest_days import calculate_next_eligible_date, get_required_rest_days
from compliance.validation import (
    EvaluateGameInput,
    RestDayInput,
    SaveGameInput,
    format_validation_error,
)
from game_service import GameNotFoundError, GameService, PlayerNotFoundError
from storage.pitching_history import PitchingHistory

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = Flask(__name__)

SERVICE = GameService(PitchingHistory(config.get_history_path()))


def _invalid(operation: str, exc: ValidationError):
    return jsonify(error_response(operation, INVALID_PARAMETER, format_validation_error(exc))), 400


def _not_found(operation: str, game_id: str):
    return jsonify(error_response(operation, GAME_NOT_FOUND, f"Game '{game_id}' not found.")), 404


# ---------------------------------------------------------------------------
# Policy and calculators
# ---------------------------------------------------------------------------


@app.route("/api/rules")
def api_rules():
    return jsonify(success_response("get_rules", {"age_rules": policy_table()}))


@app.route("/api/games/evaluate", methods=["POST"])
def api_evaluate_game():
    operation = "evaluate_game"
    data = request.get_json(silent=True) or {}
    try:
        payload = EvaluateGameInput(**data)
    except ValidationError as e:
        return _invalid(operation, e)

    report = evaluate_lines(payload.players, game_date=payload.game_date, game_id=payload.game_id)
    return jsonify(success_response(operation, report.model_dump(mode="json")))


@app.route("/api/rest-days", methods=["POST"])
def api_rest_days():
    operation = "calculate_rest_days"
    data = request.get_json(silent=True) or {}
    try:
        payload = RestDayInput(**data)
    except ValidationError as e:
        return _invalid(operation, e)

    if payload.official_pitch_count is not None:
        count = payload.official_pitch_count
    else:
        count = official_pitch_count(payload.penultimate_batter_count)

    rest_days = get_required_rest_days(payload.age, count)
    if rest_days is None:
        return jsonify(error_response(
            operation, NO_APPLICABLE_RULE,
            f"No rest-day rule for age {payload.age} with {count} pitches.",
        )), 422

    eligible = calculate_next_eligible_date(payload.game_date, payload.age, count)
    return jsonify(success_response(operation, {
        "age": payload.age,
        "game_date": payload.game_date,
        "official_pitch_count": count,
        "rest_days": rest_days,
        "next_eligible_pitch_date": eligible.isoformat(),
    }))


# ---------------------------------------------------------------------------
# Game save / review
# ---------------------------------------------------------------------------


@app.route("/api/games/<game_id>", methods=["POST", "PUT"])
def api_save_game(game_id: str):
    operation = "save_game"
    data = request.get_json(silent=True) or {}
    try:
        section = SaveGameInput(**data)
    except ValidationError as e:
        return _invalid(operation, e)

    result = SERVICE.save_game(game_id, section)
    return jsonify(success_response(operation, result.to_dict()))


@app.route("/api/games/<game_id>", methods=["GET"])
def api_get_game(game_id: str):
    operation = "get_game"
    try:
        game = SERVICE.get_game(game_id)
        report = SERVICE.evaluate_stored_game(game_id)
    except GameNotFoundError:
        return _not_found(operation, game_id)
    return jsonify(success_response(operation, {
        "game": game.model_dump(),
        "report": report.model_dump(mode="json"),
    }))


@app.route("/api/games/<game_id>", methods=["DELETE"])
def api_delete_game(game_id: str):
    operation = "delete_game"
    try:
        SERVICE.delete_game(game_id)
    except GameNotFoundError:
        return _not_found(operation, game_id)
    return jsonify(success_response(operation, {"game_id": game_id, "deleted": True}))


@app.route("/api/games")
def api_list_games():
    games = [g.model_dump() for g in SERVICE.history.list_games()]
    return jsonify(success_response("list_games", {"games": games}))


@app.route("/api/players/<player_id>/pitching")
def api_player_pitching(player_id: str):
    operation = "get_player_pitching"
    try:
        summary = SERVICE.player_pitching_summary(player_id)
    except PlayerNotFoundError:
        return jsonify(error_response(
            operation, PLAYER_NOT_FOUND, f"Player '{player_id}' not found in any saved game.",
        )), 404
    if "next_eligible_pitch_date" in summary and summary["next_eligible_pitch_date"] is None:
        summary["next_eligible_pitch_date"] = unavailable(
            "No rest-day rule applied to the latest appearance."
        )
    return jsonify(success_response(operation, summary))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=True, host="0.0.0.0", port=config.get_port(), threaded=True)
