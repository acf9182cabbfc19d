"""
Lambda handler responsible for deleting an image and its thumbnail.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.bootstrap import get_pipeline
from core.utils.constants import METRICS_NAMESPACE, SERVICE_NAME
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the file name from path parameters and the admin key from
      the ``key`` query parameter
    - Validates the file name
    - Delegates deletion to the pipeline

    Deleting an asset that does not exist succeeds.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    request = validate_request(
        DeleteImageRequest,
        {"file": path_params.get("file"), "key": query_params.get("key")},
    )

    result = get_pipeline().delete(file_name=request.file, supplied_key=request.key)
    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    response = DeleteImageResponse(
        ok=result["ok"],
        file=result["file"],
        deleted_at=result["deleted_at"],
        message="Image deleted successfully",
    )

    return ResponseBuilder.ok(response.model_dump(by_alias=True))
