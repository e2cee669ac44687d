from flask import Blueprint, jsonify

from blueprints.api_routes.games import register_game_api_routes


def create_api_blueprint(*, services):
    bp = Blueprint("api", __name__)

    @bp.route("/health", endpoint="health")
    def health():
        return jsonify(status="ok")

    register_game_api_routes(
        bp,
        {
            "game_service": services.game_service,
            "debug_dump_enabled": services.config.debug_dump_enabled,
        },
    )
    return bp
