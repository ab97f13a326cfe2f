"""Structured API errors.

Every error carries a stable ``error_location_code`` identifying the decision
point that raised it, a fresh ``error_id`` and the ``request_id`` of the
request being served. Routes let these propagate; the handlers registered in
``src.app`` turn them into JSON responses.
"""
from typing import Any, Dict, Optional
from uuid import uuid4

from flask import g, has_request_context


class BaseError(Exception):
    """Base class for errors rendered as the public error envelope."""

    name = "BaseError"
    status_code = 500
    default_message = "Um erro não esperado aconteceu."
    default_action = "Tente novamente mais tarde."

    def __init__(
        self,
        message: Optional[str] = None,
        action: Optional[str] = None,
        error_location_code: Optional[str] = None,
        key: Optional[str] = None,
        type: Optional[str] = None,
        error_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.action = action or self.default_action
        self.error_location_code = error_location_code
        self.key = key
        self.type = type
        self.error_id = error_id or str(uuid4())
        self.request_id = request_id or _current_request_id()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public response body."""
        body = {
            "name": self.name,
            "message": self.message,
            "action": self.action,
            "status_code": self.status_code,
            "error_id": self.error_id,
            "request_id": self.request_id or _current_request_id(),
            "error_location_code": self.error_location_code,
        }
        if self.key is not None:
            body["key"] = self.key
        if self.type is not None:
            body["type"] = self.type
        return body

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__}(status_code={self.status_code}, "
            f"error_location_code='{self.error_location_code}')>"
        )


class ValidationError(BaseError):
    """Malformed, missing or extra input. Raised before business logic."""

    name = "ValidationError"
    status_code = 400
    default_message = "Um erro de validação ocorreu."
    default_action = "Ajuste os dados enviados e tente novamente."


class UnauthorizedError(BaseError):
    """Session cookie present but not usable."""

    name = "UnauthorizedError"
    status_code = 401
    default_message = "Usuário não autenticado."
    default_action = "Verifique se você está autenticado com uma sessão ativa e tente novamente."


class ForbiddenError(BaseError):
    """Caller lacks the capability required for the requested flow."""

    name = "ForbiddenError"
    status_code = 403
    default_message = "Você não possui permissão para executar esta ação."
    default_action = "Verifique se você possui permissão para executar esta ação."


class NotFoundError(BaseError):
    name = "NotFoundError"
    status_code = 404
    default_message = "Não foi possível encontrar este recurso no sistema."
    default_action = "Verifique se o caminho (PATH) está correto."


class TooManyRequestsError(BaseError):
    name = "TooManyRequestsError"
    status_code = 429
    default_message = "Você realizou muitas requisições recentemente."
    default_action = "Tente novamente mais tarde ou contate o suporte caso acredite que isso seja um erro."


class InternalServerError(BaseError):
    name = "InternalServerError"
    status_code = 500
    default_message = "Um erro interno não esperado aconteceu."
    default_action = 'Informe ao suporte o valor encontrado no campo "error_id".'


class StorageError(InternalServerError):
    """Persistence failure. Not retried; rendered as a generic 500."""


def _current_request_id() -> Optional[str]:
    if has_request_context():
        return getattr(g, "request_id", None)
    return None
