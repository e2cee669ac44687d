from flask import current_app, jsonify, request

from api_errors import error_response, game_error_response
from game_errors import GameError
from request_schemas import (
    parse_create_session,
    parse_join_session,
    parse_request_prompts,
    parse_submit_similarities,
)


def register_game_api_routes(bp, context):
    game_service = context["game_service"]
    debug_dump_enabled = bool(context.get("debug_dump_enabled"))

    def _respond(fn, *, status: int = 200):
        try:
            payload = fn()
        except GameError as exc:
            if exc.status_code >= 500:
                current_app.logger.warning("Game API upstream failure: %s", exc)
            return game_error_response(exc)
        except Exception as exc:  # pragma: no cover - guarded by route tests
            current_app.logger.error("Game API failure: %s", exc, exc_info=True)
            return error_response(
                status=500,
                code="game_unavailable",
                message="The game is temporarily unavailable.",
            )
        if status == 204:
            return ("", 204)
        return jsonify(payload), status

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @bp.route("/api/group-code", methods=["GET"], endpoint="api_group_code")
    def api_group_code():
        return _respond(game_service.allocate_group_code)

    @bp.route("/api/sessions", methods=["POST"], endpoint="api_create_session")
    def api_create_session():
        def _create():
            parsed = parse_create_session(_body())
            return game_service.create_session(
                code=parsed.code,
                capacity=parsed.capacity,
                prompt_count=parsed.prompt_count,
            )

        return _respond(_create)

    @bp.route(
        "/api/sessions/<string:code>/players",
        methods=["PUT"],
        endpoint="api_join_session",
    )
    def api_join_session(code: str):
        def _join():
            parsed = parse_join_session(code, _body())
            return game_service.join_session(code=parsed.code, username=parsed.username)

        return _respond(_join)

    @bp.route(
        "/api/sessions/<string:code>/players/count",
        methods=["GET"],
        endpoint="api_player_count",
    )
    def api_player_count(code: str):
        return _respond(lambda: game_service.get_player_count(code))

    @bp.route(
        "/api/sessions/<string:code>/completion",
        methods=["GET"],
        endpoint="api_completion_count",
    )
    def api_completion_count(code: str):
        return _respond(lambda: game_service.get_completion_count(code))

    @bp.route("/api/prompts", methods=["POST"], endpoint="api_request_prompts")
    def api_request_prompts():
        def _prompts():
            parsed = parse_request_prompts(_body())
            return game_service.request_prompts(
                code=parsed.code,
                solo=parsed.solo,
                prompt_count=parsed.prompt_count,
            )

        return _respond(_prompts)

    @bp.route(
        "/api/sessions/<string:code>/similarities",
        methods=["GET"],
        endpoint="api_get_prompts",
    )
    def api_get_prompts(code: str):
        return _respond(lambda: game_service.get_prompts(code))

    @bp.route("/api/similarities", methods=["PUT"], endpoint="api_submit_similarities")
    def api_submit_similarities():
        def _submit():
            parsed = parse_submit_similarities(_body())
            game_service.submit_similarities(
                code=parsed.code,
                username=parsed.username,
                similarities=parsed.similarities,
            )

        return _respond(_submit, status=204)

    @bp.route("/api/debug/sessions", methods=["GET"], endpoint="api_debug_sessions")
    def api_debug_sessions():
        if not debug_dump_enabled:
            return error_response(status=404, code="not_found", message="Not found.")
        current_app.logger.warning("Full session dump requested from %s", request.remote_addr)
        return jsonify(sessions=game_service.dump_sessions())
