"""
Lambda handler responsible for listing stored images, most recent first.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.image import ListAssetsResponse
from core.services.bootstrap import get_pipeline, get_settings
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.request import resolve_base_url
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Every call enumerates the backend afresh; nothing is cached between
    requests.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image list request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    base_url = resolve_base_url(event, get_settings().base_url)
    entries = get_pipeline().list_assets(base_url=base_url)

    response = ListAssetsResponse(images=entries, count=len(entries))

    return ResponseBuilder.ok(response.model_dump(by_alias=True))
