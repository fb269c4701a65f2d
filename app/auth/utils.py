"""
Scorer tokens - JWT handling and the scoring capability check
"""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from app.config import settings

SCORER_ROLE = "scorer"

# Security scheme for Bearer token
security = HTTPBearer()


def create_access_token(scorer_id: int, role: str = SCORER_ROLE) -> str:
    """Create a JWT access token"""
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(scorer_id),
        "exp": expire,
        "type": "access",
        "role": role,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, token_type: str = "access") -> Optional[dict]:
    """Verify a JWT token and return its claims if valid"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        if payload.get("type") != token_type:
            return None
        if payload.get("sub") is None:
            return None
        return payload
    except JWTError:
        return None


def require_scorer(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> int:
    """
    FastAPI dependency guarding every scoring mutation.
    Use this in route functions: scorer_id: int = Depends(require_scorer)
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    claims = verify_token(credentials.credentials, "access")
    if claims is None:
        raise credentials_exception
    if claims.get("role") != SCORER_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Scorer role required")

    return int(claims["sub"])
