"""Session cookie authentication."""
from functools import wraps
from typing import Any, Callable

from flask import current_app, g, request, after_this_request

from src.errors import UnauthorizedError
from src.extensions import db
from src.repositories.session_repository import SessionRepository


SESSION_COOKIE_NAME = "session_id"


def load_session(fn: Callable) -> Callable:
    """
    Decorator resolving the optional ``session_id`` cookie.

    Sets ``g.user`` to the session owner, or to None for anonymous
    callers. A cookie that does not match an active session is rejected
    with UnauthorizedError and cleared.

    Usage:
        @bp.route("/", methods=["POST"])
        @load_session
        def handler():
            caller = g.user
    """

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = request.cookies.get(SESSION_COOKIE_NAME)

        if not token:
            g.user = None
            return fn(*args, **kwargs)

        session = SessionRepository(db.session).find_valid_by_token(token)
        if not session:
            current_app.container.activity_logger().log_security_event(
                "invalid_session", ip_address=request.remote_addr
            )

            @after_this_request
            def clear_cookie(response):
                response.delete_cookie(SESSION_COOKIE_NAME, path="/")
                return response

            raise UnauthorizedError(
                message="Usuário não possui sessão ativa.",
                action="Verifique se este usuário está logado.",
                error_location_code="MIDDLEWARE:AUTH:LOAD_SESSION:INVALID_SESSION",
            )

        g.user = session.user
        return fn(*args, **kwargs)

    return wrapper
