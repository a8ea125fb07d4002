# Package
import json

from flask import Blueprint, current_app, jsonify, request

from relay.discord.api import DeliveryError
from relay.jenkins.models import InboundShape, JenkinsEvent, PayloadError, parse_event
from relay.jenkins.translator import convert
from relay.logging_config import get_logger

logger = get_logger(__name__)

jenkins_bp = Blueprint("jenkins", __name__)


def _configured_shape(settings):
    if settings.input_shape == "auto":
        return None
    return InboundShape(settings.input_shape)


@jenkins_bp.route("/jenkins", methods=["POST"])
def jenkins_webhook():
    """
    Receive a Jenkins build event, reshape it into a Discord embed and forward it.
    """
    state = current_app.extensions["relay"]

    try:
        payload = json.loads(request.get_data(as_text=True))
        event = parse_event(payload, shape=_configured_shape(state.settings))
    except (json.JSONDecodeError, RecursionError, PayloadError) as e:
        logger.warning("Error binding payload", error=str(e))
        return jsonify({"error": "Invalid payload"}), 400

    if isinstance(event, JenkinsEvent):
        logger.info(
            "Received Jenkins webhook",
            shape=event.shape.value,
            job=event.display_name or event.name,
            number=event.build.number,
            result=event.build.result,
            phase=event.build.status,
        )
    else:
        logger.info(
            "Received Jenkins webhook",
            shape=event.shape.value,
            project=event.project_name,
            build=event.build_name,
            event=event.event,
        )

    discord_payload = convert(event)

    try:
        state.discord.send(discord_payload)
    except DeliveryError as e:
        logger.error("Error sending to Discord", error=str(e), status_code=e.status_code)
        return jsonify({"error": "Failed to send to Discord"}), 500

    return jsonify({"status": "success"}), 200


@jenkins_bp.route("/print", methods=["POST"])
def print_request_body():
    """Log the raw request body and echo it back, for wiring up a new Jenkins job."""
    body_bytes = request.get_data()
    body_content = body_bytes.decode("utf-8", errors="replace")

    logger.info("Request body content", body=body_content, content_length=len(body_bytes))

    return jsonify({
        "status": "success",
        "body_content": body_content,
        "content_length": len(body_bytes),
    }), 200
