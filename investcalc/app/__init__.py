"""Application factory and app-wide configuration."""

from http import HTTPStatus
from typing import Any, Mapping, Optional, Union

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from investcalc.app.api.routes import api_bp
from investcalc.config import Config, solver_settings_from_config
from investcalc.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    config_object: Union[str, type] = Config,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Flask:
    """Build the Flask app instance.

    Configuration is layered: `config_object`, then `INVESTCALC_*` environment
    variables, then `overrides`.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.from_prefixed_env("INVESTCALC")
    if overrides:
        app.config.from_mapping(overrides)

    configure_logging(
        app.config["LOG_LEVEL"],
        json_output=app.config["LOG_JSON"],
        cache_loggers=app.config["LOG_CACHE_LOGGERS"],
    )
    app.extensions["solver_settings"] = solver_settings_from_config(app.config)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_error_handler(HTTPException, _handle_http_error)

    logger.info(
        "app.created",
        testing=app.testing,
        solver_max_iterations=app.extensions["solver_settings"].max_iterations,
    )
    return app


def _handle_http_error(exc: HTTPException):
    """Render werkzeug HTTP errors (bad JSON, unknown routes, ...) as JSON."""
    return jsonify({"detail": exc.description}), exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
