"""Account recovery routes."""
import logging

from flask import Blueprint, current_app, g, jsonify, request

from src.events.recovery_events import RecoveryTokenCreatedEvent
from src.extensions import limiter
from src.middleware.auth import load_session
from src.schemas.recovery_schemas import (
    recovery_token_response_schema,
    validate_recovery_request,
)

logger = logging.getLogger(__name__)

# Create blueprint
recovery_bp = Blueprint("recovery", __name__, url_prefix="/api/v1")


def _recovery_rate_limit() -> str:
    return current_app.config.get("RECOVERY_RATE_LIMIT", "50 per minute")


@recovery_bp.route("/recovery", methods=["POST"])
@limiter.limit(_recovery_rate_limit)
@load_session
def create_recovery_token():
    """
    Request a password recovery token.

    Flow: Route → RecoveryService → Token lifecycle → emit event → Email handler

    ---
    Request body (exactly one key):
        {"email": "user@example.com"}
        {"username": "someone"}  # requires "create:recovery_token:username"

    Returns:
        201: {
            "used": false,
            "expires_at": "2026-01-01T00:15:00.000Z",
            "created_at": "2026-01-01T00:00:00.000Z",
            "updated_at": "2026-01-01T00:00:00.000Z"
        }
        400: ValidationError
        401: UnauthorizedError (invalid session cookie)
        403: ForbiddenError (username flow without permission)
        404: NotFoundError (username flow, user unknown or nuked)
    """
    values = validate_recovery_request(request.get_json(silent=True))

    container = current_app.container
    recovery_service = container.recovery_service()

    result = recovery_service.request_recovery(
        caller=g.user,
        username=values.get("username"),
        email=values.get("email"),
    )

    container.activity_logger().log(
        action="recovery_requested",
        user_id=g.user.id if g.user else None,
        metadata={
            "ip": request.remote_addr,
            "flow": "username" if "username" in values else "email",
            "notified": result.notify_user is not None,
        },
    )

    if result.notify_user is not None:
        user = result.notify_user
        dispatch = container.event_dispatcher().emit(
            RecoveryTokenCreatedEvent(
                user_id=user.id,
                username=user.username,
                email=user.email,
                token_id=result.token.id,
                request_ip=request.remote_addr,
            )
        )
        if not dispatch.success:
            logger.warning(f"Recovery email not delivered: {dispatch.error}")

    return jsonify(recovery_token_response_schema.dump(result.token)), 201
