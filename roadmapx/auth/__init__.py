# roadmapx/auth/__init__.py
"""
Authentication module for RoadmapX.
Verifies Cognito access tokens and resolves the local user.
"""

from .middleware import require_user, verify_access_token, Identity

__all__ = [
    "require_user",
    "verify_access_token",
    "Identity",
]
