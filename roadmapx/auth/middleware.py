# roadmapx/auth/middleware.py
"""
FastAPI authentication dependency backed by Amazon Cognito access tokens.

Sign-up, sign-in and token issuance happen in Cognito (the frontend uses
Amplify). This module only checks a presented access token with Cognito's
GetUser call and maps the identity onto a local User row.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from roadmapx import config
from roadmapx.aws import cognito_client, error_code
from roadmapx.db import get_db
from roadmapx.users import service as users_service
from roadmapx.users.models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

_REJECTED_TOKEN_CODES = {"NotAuthorizedException", "UserNotFoundException", "InvalidParameterException"}


@dataclass
class Identity:
    """Verified identity as reported by Cognito."""
    sub: str
    email: str
    name: Optional[str] = None


def verify_access_token(token: str) -> Identity:
    """
    Ask Cognito who owns an access token.

    Raises:
        HTTPException 401: token invalid, expired or revoked
        HTTPException 503: Cognito unreachable or misconfigured
    """
    try:
        response = cognito_client().get_user(AccessToken=token)
    except ClientError as e:
        if error_code(e) in _REJECTED_TOKEN_CODES:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        logger.error("[auth] Cognito GetUser failed: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Identity provider unavailable")
    except BotoCoreError as e:
        logger.error("[auth] Cognito unreachable: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Identity provider unavailable")

    attributes = {a["Name"]: a["Value"] for a in response.get("UserAttributes", [])}
    sub = attributes.get("sub") or response.get("Username")
    email = attributes.get("email") or f"{response.get('Username', sub)}@users.noreply"
    return Identity(sub=sub, email=email, name=attributes.get("name"))


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency that resolves the calling user.

    With ROADMAPX_DEV_AUTH enabled every request acts as the fixed
    development user and no token is needed.

    Raises:
        HTTPException 401: missing or rejected token
        HTTPException 503: identity provider unavailable
    """
    if config.dev_auth_enabled():
        dev = config.DEV_USER
        return users_service.upsert_user(db, dev["cognito_id"], dev["email"], dev["name"])

    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    identity = verify_access_token(credentials.credentials)
    return users_service.upsert_user(db, identity.sub, identity.email, identity.name)
