"""
Security utilities for bearer token handling

Tokens are issued by the identity provider; this service only verifies them
and reads the session claims (sub, email, role, employee_id).
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional
from jose import JWTError, jwt
from hrms.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_EXPIRE_MINUTES = 120


def create_access_token(data: Dict, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT (used by tooling and tests to mint session tokens)"""
    to_encode = data.copy()

    if expires_minutes is None:
        expires_minutes = DEFAULT_EXPIRE_MINUTES

    expire = datetime.utcnow() + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        logger.debug("Rejected bearer token", exc_info=True)
        raise ValueError("Invalid token")
