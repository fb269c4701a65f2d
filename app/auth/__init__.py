"""
Authentication module for scorer JWT tokens
"""
from app.auth.utils import require_scorer, create_access_token, verify_token

__all__ = [
    "require_scorer",
    "create_access_token",
    "verify_token",
]
