"""Request payload validation with client-safe error messages."""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# First matching fragment (lower-cased) wins.
_FRIENDLY_MESSAGES: tuple[tuple[str, str], ...] = (
    ("base64", "File must be a valid Base64-encoded string"),
    ("field required", "This field is required"),
    ("string should match pattern", "Invalid file name"),
    ("type", "Invalid value type"),
)


def _field_name(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def _friendly(message: str) -> str:
    message = message.replace("Value error,", "").strip()
    lowered = message.lower()

    for fragment, replacement in _FRIENDLY_MESSAGES:
        if fragment in lowered:
            return replacement
    return message


def sanitize_validation_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce Pydantic errors to ``{"field", "message"}`` pairs.

    The rejected input, docs URL and context are dropped so nothing the
    client sent is echoed back.
    """
    return [
        {
            "field": _field_name(err.get("loc", ())),
            "message": _friendly(err.get("msg", "Invalid value")),
        }
        for err in errors
    ]


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        ValidationError: With sanitized field errors in ``details``
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc
