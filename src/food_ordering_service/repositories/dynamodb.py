"""DynamoDB resource factory shared by the service and its scripts."""

import logging
import os

import boto3
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> DynamoDBServiceResource:
    """Create DynamoDB resource with appropriate configuration.

    DYNAMODB_ENDPOINT selects a local DynamoDB (credentials from
    AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY); otherwise boto3 uses its default
    credential chain in AWS_REGION.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)
