"""
Error boundary for the API Gateway Lambda handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import ImageServiceError
from core.utils.constants import (
    ERROR_CODE_BACKEND_READ_FAILED,
    ERROR_CODE_BACKEND_WRITE_FAILED,
    ERROR_CODE_FORBIDDEN,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_PAYLOAD_TOO_LARGE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_THUMBNAIL_GENERATION_FAILED,
    ERROR_CODE_UNSUPPORTED_MEDIA_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)
from core.utils.response import JsonDict, ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

Handler = Callable[[Any, Any], JsonDict]

ERROR_STATUS_MAP: dict[str, HTTPStatus] = {
    ERROR_CODE_VALIDATION_FAILED: HTTPStatus.BAD_REQUEST,
    ERROR_CODE_UNSUPPORTED_MEDIA_TYPE: HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
    ERROR_CODE_PAYLOAD_TOO_LARGE: HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
    ERROR_CODE_THUMBNAIL_GENERATION_FAILED: HTTPStatus.UNPROCESSABLE_ENTITY,
    ERROR_CODE_FORBIDDEN: HTTPStatus.FORBIDDEN,
    ERROR_CODE_RESOURCE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ERROR_CODE_BACKEND_WRITE_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
    ERROR_CODE_BACKEND_READ_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def status_for(exc: ImageServiceError) -> HTTPStatus:
    """Map a domain error code to its HTTP status (500 when unmapped)."""
    return ERROR_STATUS_MAP.get(exc.error_code, HTTPStatus.INTERNAL_SERVER_ERROR)


def api_gateway_handler(func: Handler) -> Callable[..., JsonDict]:
    """
    Wrap a Lambda handler with CORS preflight handling and error mapping.

    Domain errors become ``{"error": <code>, "message": ...}`` bodies with
    the status from `ERROR_STATUS_MAP`. Anything else is logged with its
    traceback and answered with a bare 500.

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"ok": True})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except ImageServiceError as exc:
            status = status_for(exc)
            log_extra = {
                "handler": func.__name__,
                "request_id": request_id,
                "error_code": exc.error_code,
                "status": status.value,
            }
            if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
                logger.exception("Service error in handler", extra=log_extra)
            else:
                logger.warning(exc.message, extra=log_extra)

            return ResponseBuilder.service_error(
                exc,
                status,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception:
            logger.exception(
                "Unexpected error in handler",
                extra={"handler": func.__name__, "request_id": request_id},
            )
            return ResponseBuilder.error(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                error=ERROR_CODE_INTERNAL_ERROR,
                message="Server error",
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
