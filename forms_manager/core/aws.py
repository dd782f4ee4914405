"""AWS client construction.

Provides SNS and S3 clients with consistent region and endpoint
configuration (the endpoint override is used against localstack).
"""

import boto3
from botocore.config import Config

from forms_manager.core.config import Settings


def _client_kwargs(settings: Settings) -> dict:
    kwargs = {"region_name": settings.aws_region}
    if settings.aws_endpoint_url:
        kwargs["endpoint_url"] = settings.aws_endpoint_url
    return kwargs


def get_sns_client(settings: Settings):
    """Create an SNS client for audit event publication."""
    return boto3.client("sns", **_client_kwargs(settings))


def get_s3_client(settings: Settings):
    """Create an S3 client for the legacy definition bucket."""
    kwargs = _client_kwargs(settings)
    if settings.aws_endpoint_url:
        # localstack needs path-style addressing
        kwargs["config"] = Config(s3={"addressing_style": "path"})
    return boto3.client("s3", **kwargs)
