"""Object store client configuration."""

from typing import Optional
import boto3
from botocore.client import BaseClient
from botocore.config import Config
from .settings import Settings, settings as default_settings


def get_storage_client(config: Optional[Settings] = None) -> BaseClient:
    """
    Get an S3 client for the configured endpoint.
    Path-style addressing is forced so S3-compatible stores work unchanged.
    """
    config = config or default_settings
    return boto3.client(
        "s3",
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        region_name=config.region,
        endpoint_url=config.endpoint,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )
