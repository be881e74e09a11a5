"""AWS Lambda handler for API Gateway requests.

The FastAPI application is adapted with Mangum and created once per Lambda
container, during cold start.
"""

import logging
import os
from typing import Any

from mangum import Mangum

import main

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    mangum_handler = Mangum(main.app, lifespan="off")
else:
    mangum_handler = None  # type: ignore


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway events.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    if mangum_handler is None:
        logger.error("Lambda handler invoked without an application")
        return {"statusCode": 500, "body": "Internal server error"}

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {"statusCode": 500, "body": "Internal server error"}
