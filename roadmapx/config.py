# FILE: roadmapx/config.py
"""
Runtime configuration for RoadmapX.

All values come from environment variables (a .env file is loaded by main.py
before anything else is imported). Getters read the environment on every
call so tests can override settings with monkeypatch.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_REGION = "us-east-1"
DEFAULT_BUCKET = "roadmapx-files"
DEFAULT_TRAINING_IMAGE = "811284229777.dkr.ecr.us-east-1.amazonaws.com/xgboost:1.7-1"

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_FILES_PER_UPLOAD = 5
DOWNLOAD_URL_EXPIRES = 3600  # 1 hour

ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]

# Fixed identity used when ROADMAPX_DEV_AUTH is on
DEV_USER = {
    "cognito_id": "dev-cognito-123",
    "email": "dev@example.com",
    "name": "Development User",
}


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class AwsSettings:
    region: str
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None

    def client_kwargs(self) -> dict:
        """Keyword arguments for boto3.client(). Empty credentials fall back to boto3's chain."""
        kwargs = {"region_name": self.region}
        if self.access_key_id and self.secret_access_key:
            kwargs["aws_access_key_id"] = self.access_key_id
            kwargs["aws_secret_access_key"] = self.secret_access_key
            if self.session_token:
                kwargs["aws_session_token"] = self.session_token
        return kwargs


@dataclass(frozen=True)
class StorageSettings:
    bucket_name: str
    region: str
    max_file_size: int = MAX_FILE_SIZE
    allowed_mime_types: List[str] = field(default_factory=lambda: list(ALLOWED_MIME_TYPES))


@dataclass(frozen=True)
class CognitoSettings:
    user_pool_id: Optional[str]
    client_id: Optional[str]
    region: str


@dataclass(frozen=True)
class AiSettings:
    region: str
    personalize_role_arn: str
    sagemaker_role_arn: str
    s3_bucket: str
    training_image: str


def get_aws_settings() -> AwsSettings:
    return AwsSettings(
        region=os.getenv("AWS_REGION", DEFAULT_REGION),
        access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
        secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        session_token=os.getenv("AWS_SESSION_TOKEN") or None,
    )


def get_storage_settings() -> StorageSettings:
    region = os.getenv("AWS_REGION", DEFAULT_REGION)
    return StorageSettings(
        bucket_name=os.getenv("S3_BUCKET_NAME", DEFAULT_BUCKET),
        region=os.getenv("S3_REGION", region),
    )


def get_cognito_settings() -> CognitoSettings:
    return CognitoSettings(
        user_pool_id=os.getenv("COGNITO_USER_POOL_ID") or None,
        client_id=os.getenv("COGNITO_CLIENT_ID") or None,
        region=os.getenv("AWS_REGION", DEFAULT_REGION),
    )


def get_ai_settings() -> AiSettings:
    # An explicitly empty S3_BUCKET_NAME disables the AI features that need S3
    bucket = os.getenv("S3_BUCKET_NAME")
    if bucket is None:
        bucket = os.getenv("AI_ARTIFACTS_BUCKET", DEFAULT_BUCKET)
    return AiSettings(
        region=os.getenv("AWS_REGION", DEFAULT_REGION),
        personalize_role_arn=os.getenv("PERSONALIZE_ROLE_ARN", ""),
        sagemaker_role_arn=os.getenv("SAGEMAKER_ROLE_ARN", ""),
        s3_bucket=bucket,
        training_image=os.getenv("SAGEMAKER_TRAINING_IMAGE", DEFAULT_TRAINING_IMAGE),
    )


def dev_auth_enabled() -> bool:
    """Skip token verification and act as DEV_USER. Never enable in production."""
    return _flag("ROADMAPX_DEV_AUTH")


def fake_comprehend_enabled() -> bool:
    return os.getenv("DEV_FAKE_COMPREHEND", "") == "1"


def get_cors_origins() -> List[str]:
    raw = os.getenv("ROADMAPX_CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)


def get_log_level() -> str:
    return os.getenv("ROADMAPX_LOG_LEVEL", "INFO").upper()
