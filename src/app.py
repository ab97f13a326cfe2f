"""Flask application factory."""
import logging
from uuid import uuid4

from flask import Flask, g, jsonify, make_response
from typing import Optional, Dict, Any
from werkzeug.exceptions import HTTPException

from src.errors import (
    BaseError,
    InternalServerError,
    NotFoundError,
    TooManyRequestsError,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


def configure_logging(app: Flask) -> None:
    """Apply LOG_LEVEL to the root logger (gunicorn handles the handlers)."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    from src.config import get_config
    # Instantiated so ProductionConfig can reject unsafe settings
    app.config.from_object(get_config()())
    if config:
        app.config.update(config)

    configure_logging(app)

    # Must run before the limiter's own before_request hook
    @app.before_request
    def tag_request():
        g.request_id = str(uuid4())

    # Initialize extensions
    from src.extensions import db, limiter
    db.init_app(app)
    limiter.init_app(app)

    # Initialize DI container
    from src.container import Container
    container = Container()
    container.config.from_dict(dict(app.config))
    app.container = container

    # Event handlers
    dispatcher = container.event_dispatcher()
    dispatcher.register(container.recovery_email_handler())

    @app.before_request
    def inject_db_session():
        """Inject the db session into the container."""
        container.db_session.override(db.session)

    @app.after_request
    def add_request_id(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    # Register blueprints
    from src.routes.recovery import recovery_bp
    app.register_blueprint(recovery_bp)

    # Health check endpoint
    @app.route("/api/v1/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "service": "recovery-api",
            "version": "0.1.0"
        }), 200

    _register_error_handlers(app)

    return app


def _error_response(error: BaseError):
    return make_response(jsonify(error.to_dict()), error.status_code)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BaseError)
    def handle_base_error(error: BaseError):
        """Render structured errors raised by routes and services."""
        if error.status_code >= 500:
            logger.error(
                f"{error.name} at {error.error_location_code} "
                f"(error_id={error.error_id}, request_id={error.request_id})",
                exc_info=error,
            )
        return _error_response(error)

    @app.errorhandler(429)
    def ratelimit_handler(error):
        """Handle rate limit exceeded errors with the error envelope."""
        response = _error_response(
            TooManyRequestsError(
                error_location_code="MIDDLEWARE:RATE_LIMIT:TOO_MANY_REQUESTS",
            )
        )
        response.headers["Retry-After"] = "60"
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        """Render werkzeug errors (404, 405, ...) with the error envelope."""
        if error.code == 404:
            return _error_response(
                NotFoundError(error_location_code="ROUTER:NOT_FOUND")
            )

        body = InternalServerError(
            message=error.description,
            action="Verifique a requisição e tente novamente.",
            error_location_code="ROUTER:HTTP_EXCEPTION",
        ).to_dict()
        body["name"] = error.name.replace(" ", "") + "Error"
        body["status_code"] = error.code
        return make_response(jsonify(body), error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """Anything else is a bug: log it and hide the details."""
        internal = InternalServerError(error_location_code="APP:UNEXPECTED_ERROR")
        logger.exception(
            f"Unexpected error (error_id={internal.error_id}, "
            f"request_id={internal.request_id})"
        )
        return _error_response(internal)
