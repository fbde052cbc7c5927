"""
AWS client access for RoadmapX.
"""

from .clients import (
    get_client,
    reset_clients,
    s3_client,
    cognito_client,
    comprehend_client,
    personalize_client,
    sagemaker_client,
    error_code,
)

__all__ = [
    "get_client",
    "reset_clients",
    "s3_client",
    "cognito_client",
    "comprehend_client",
    "personalize_client",
    "sagemaker_client",
    "error_code",
]
