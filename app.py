import logging
import os
import time as timelib

from dotenv import load_dotenv
from flask import Flask, g, request

from app_services import AppServiceConfig, AppServices
from blueprints.api import create_api_blueprint

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_FILE_MAX_BYTES = 2 * 1024 * 1024


# ─────────────────────────────────────────────
# Hard-capped file handler (no deletion)
# ─────────────────────────────────────────────


class MaxSizeFileHandler(logging.FileHandler):
    def __init__(self, filename, max_bytes, **kwargs):
        self.max_bytes = max_bytes
        super().__init__(filename, **kwargs)

    def emit(self, record):
        try:
            if os.path.exists(self.baseFilename):
                if os.path.getsize(self.baseFilename) >= self.max_bytes:
                    return
            super().emit(record)
        except Exception:
            self.handleError(record)


# ─────────────────────────────────────────────
# Logging configuration
# ─────────────────────────────────────────────


def configure_logging(app: Flask, log_file: str = "") -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = MaxSizeFileHandler(log_file, max_bytes=LOG_FILE_MAX_BYTES)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    app.logger.handlers.clear()
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = False
    for handler in handlers:
        app.logger.addHandler(handler)

    # Silence Werkzeug access logs; requests are logged below.
    logging.getLogger("werkzeug").setLevel(logging.ERROR)


def create_app(config: AppServiceConfig | None = None, services: AppServices | None = None) -> Flask:
    if services is None:
        services = AppServices(config or AppServiceConfig.from_env())
    config = services.config

    app = Flask(__name__)
    app.extensions["mindspring_services"] = services
    configure_logging(app, config.log_file)
    services.log_runtime_config_warnings()

    @app.before_request
    def start_timer():
        g.start_time = timelib.time()

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = config.effective_cors_origin
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,OPTIONS"
        return response

    @app.after_request
    def log_request(response):
        duration = round(timelib.time() - g.get("start_time", timelib.time()), 3)
        app.logger.info(
            "%s %s (%s) -> %s [%ss]",
            request.method,
            request.path,
            request.endpoint,
            response.status_code,
            duration,
        )
        return response

    @app.teardown_request
    def log_exception(exception):
        if exception:
            app.logger.warning(
                "Unhandled exception on %s %s: %s",
                request.method,
                request.path,
                type(exception).__name__,
            )

    app.register_blueprint(create_api_blueprint(services=services))
    app.logger.info("Logging initialised")
    return app


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    create_app().run(debug=False, host=host, port=port)
