"""Recovery request/response schemas."""
from typing import Any, Dict, Tuple

from marshmallow import Schema, fields, validate, pre_load, post_load, EXCLUDE
from marshmallow import ValidationError as MarshmallowValidationError

from src.errors import ValidationError

USERNAME_MAX_LENGTH = 30
VALIDATION_LOCATION_CODE = "MODEL:VALIDATOR:FINAL_SCHEMA"

# Error type -> message template, keyed by the offending field
ERROR_MESSAGES = {
    "string.base": '"{key}" deve ser do tipo String.',
    "string.empty": '"{key}" não pode estar em branco.',
    "string.alphanum": '"{key}" deve conter apenas caracteres alfanuméricos.',
    "string.max": '"{key}" deve conter no máximo {limit} caracteres.',
    "string.email": '"{key}" deve conter um email válido.',
    "object.base": '"body" enviado deve ser do tipo Object.',
    "object.min": "Objeto enviado deve ter no mínimo uma chave.",
    "object.xor": 'Objeto enviado deve conter apenas uma das chaves: "username" ou "email".',
}


def _message(error_type: str, key: str, **params: Any) -> str:
    return ERROR_MESSAGES[error_type].format(key=key, **params)


class RecoveryRequestSchema(Schema):
    """Body of POST /api/v1/recovery. Unknown keys are dropped."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(
        validate=[
            validate.Length(min=1, error=_message("string.empty", "username")),
            validate.Length(
                max=USERNAME_MAX_LENGTH,
                error=_message("string.max", "username", limit=USERNAME_MAX_LENGTH),
            ),
            validate.Regexp(
                r"^[a-zA-Z0-9]*$",
                error=_message("string.alphanum", "username"),
            ),
        ],
        error_messages={
            "invalid": _message("string.base", "username"),
            "null": _message("string.base", "username"),
        },
    )
    email = fields.Email(
        error_messages={
            "invalid": _message("string.email", "email"),
            "null": _message("string.base", "email"),
        },
    )

    @pre_load
    def strip_email(self, data: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        email = data.get("email")
        if isinstance(email, str):
            data = {**data, "email": email.strip()}
        return data

    @post_load
    def lowercase_email(self, data: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        if "email" in data:
            data["email"] = data["email"].lower()
        return data


class Iso8601DateTime(fields.DateTime):
    """Naive UTC datetime rendered as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.isoformat(timespec="milliseconds") + "Z"


class RecoveryTokenResponseSchema(Schema):
    """Public view of a recovery token. Identity fields are never dumped."""

    used = fields.Boolean()
    expires_at = Iso8601DateTime()
    created_at = Iso8601DateTime()
    updated_at = Iso8601DateTime()


# Rendered message -> (key, type), used to recover the error type marshmallow
# only reports as text.
_ERROR_TYPES: Dict[str, Tuple[str, str]] = {}
for _key in ("username", "email"):
    for _type in ERROR_MESSAGES:
        if _type.startswith("string."):
            _ERROR_TYPES[_message(_type, _key, limit=USERNAME_MAX_LENGTH)] = (_key, _type)

recovery_request_schema = RecoveryRequestSchema()
recovery_token_response_schema = RecoveryTokenResponseSchema()


def _object_error(error_type: str) -> ValidationError:
    return ValidationError(
        message=_message(error_type, "object"),
        error_location_code=VALIDATION_LOCATION_CODE,
        key="object",
        type=error_type,
    )


def validate_recovery_request(data: Any) -> Dict[str, str]:
    """
    Validate and normalize a recovery request body.

    Args:
        data: Decoded JSON body (None when the body is missing)

    Returns:
        Dict with exactly one of "username" or "email"

    Raises:
        ValidationError: First problem found, as key/type pair
    """
    if not isinstance(data, dict):
        raise _object_error("object.base")

    try:
        values = recovery_request_schema.load(data)
    except MarshmallowValidationError as err:
        raise _field_error(err.messages) from err

    if not values:
        raise _object_error("object.min")
    if len(values) > 1:
        raise _object_error("object.xor")

    return values


def _field_error(messages: Dict[str, Any]) -> ValidationError:
    for key in ("username", "email"):
        if key not in messages:
            continue
        message = messages[key][0]
        key, error_type = _ERROR_TYPES.get(message, (key, "any.invalid"))
        return ValidationError(
            message=message,
            error_location_code=VALIDATION_LOCATION_CODE,
            key=key,
            type=error_type,
        )

    return _object_error("object.base")
