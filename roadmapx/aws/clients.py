# FILE: roadmapx/aws/clients.py
"""
boto3 client factory.

Clients are cached per (service, region, credentials) so every request
reuses the same underlying connection pool. boto3 clients are thread-safe,
which matters because FastAPI runs sync endpoints in a threadpool.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

import boto3
from botocore.config import Config

from roadmapx.config import get_aws_settings, get_storage_settings

logger = logging.getLogger(__name__)

_RETRY_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})

_clients: Dict[Tuple, object] = {}
_lock = threading.Lock()


def get_client(service_name: str, region: Optional[str] = None):
    """Return a cached boto3 client for service_name."""
    settings = get_aws_settings()
    kwargs = settings.client_kwargs()
    if region:
        kwargs["region_name"] = region

    key = (service_name, kwargs["region_name"], kwargs.get("aws_access_key_id"))
    with _lock:
        client = _clients.get(key)
        if client is None:
            logger.debug("[aws] Creating %s client in %s", service_name, kwargs["region_name"])
            client = boto3.client(service_name, config=_RETRY_CONFIG, **kwargs)
            _clients[key] = client
    return client


def reset_clients() -> None:
    """Drop cached clients (credentials rotated, or between tests)."""
    with _lock:
        _clients.clear()


def s3_client():
    return get_client("s3", region=get_storage_settings().region)


def cognito_client():
    return get_client("cognito-idp")


def comprehend_client():
    return get_client("comprehend")


def personalize_client():
    return get_client("personalize")


def sagemaker_client():
    return get_client("sagemaker")


def error_code(exc: Exception) -> str:
    """Extract the AWS error code from a botocore ClientError, or '' for anything else."""
    response = getattr(exc, "response", None) or {}
    return response.get("Error", {}).get("Code", "")
