from dataclasses import dataclass
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from relay.config import RelaySettings, get_config
from relay.discord.api import DiscordAPI, mask_url
from relay.jenkins import jenkins_bp
from relay.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RelayState:
    """Per-app collaborators, stored in app.extensions["relay"]."""
    settings: RelaySettings
    discord: DiscordAPI


def create_app(settings: Optional[RelaySettings] = None):
    """
    Build the relay Flask application.

    Args:
        settings: relay settings; read from the environment when None

    Raises:
        ConfigError: if settings are read from the environment and are invalid
    """
    config_class = get_config()

    if settings is None:
        settings = RelaySettings.from_env()

    configure_logging(log_level=config_class.LOG_LEVEL, log_file=config_class.LOG_FILE)

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.ensure_ascii = False

    app.extensions["relay"] = RelayState(
        settings=settings,
        discord=DiscordAPI(settings.discord_webhook_url, timeout=settings.delivery_timeout),
    )

    logger.info(f"Starting application in {config_class.ENV} environment")

    # Get allowed origins from environment variable
    allowed_origins = app.config.get("CORS_ORIGINS", "*")
    if allowed_origins != "*":
        # Parse comma-separated list if provided
        allowed_origins = [origin.strip() for origin in allowed_origins.split(",")]

    CORS(app,
         resources={r"/*": {"origins": allowed_origins}},
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "OPTIONS"])

    @app.after_request
    def log_request(response):
        logger.info(
            "Request handled",
            method=request.method,
            path=request.path,
            status=response.status_code,
            remote_addr=request.remote_addr,
        )
        return response

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"}), 200

    # Register blueprints
    app.register_blueprint(jenkins_bp, url_prefix="/webhook")

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Return routing and method errors as JSON"""
        response = jsonify({"error": e.name})
        response.status_code = e.code
        return response

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Log unexpected errors and return a generic JSON 500"""
        logger.error("Unhandled exception", error=str(e), exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    logger.info(
        "Relay configured",
        discord_webhook=mask_url(settings.discord_webhook_url),
        jenkins_url=settings.jenkins_url or "not set",
        input_shape=settings.input_shape,
    )
    logger.info(f"Jenkins webhook endpoint: http://localhost:{settings.port}/webhook/jenkins")
    logger.info(f"Print request body endpoint: http://localhost:{settings.port}/webhook/print")
    logger.info(f"Health check endpoint: http://localhost:{settings.port}/health")

    return app
