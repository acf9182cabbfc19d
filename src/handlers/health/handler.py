"""
Lambda handler for liveness checks.
"""

from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.bootstrap import get_settings
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder


@api_gateway_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Report liveness and the active storage backend."""
    return ResponseBuilder.ok({"ok": True, "storage": get_settings().storage})
