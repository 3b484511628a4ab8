"""
Security Utilities
Password hashing, access tokens and input sanitization using industry-standard libraries
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Any, Optional

# Input sanitization
import bleach
from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def check_password_strength(password: str) -> list[str]:
    """Return a list of problems with the password; empty when acceptable"""
    feedback = []
    if len(password) < 8:
        feedback.append("Password must be at least 8 characters long")
    if not re.search(r"[A-Za-z]", password):
        feedback.append("Password must contain a letter")
    if not re.search(r"\d", password):
        feedback.append("Password must contain a number")
    return feedback


# ============================================================================
# ACCESS TOKENS
# ============================================================================


def create_jwt_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Claims to encode in the token
        expires_delta: Token lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_jwt_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify and decode a JWT token

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


# ============================================================================
# INPUT SANITIZATION
# ============================================================================


def sanitize_text(value: Optional[str], max_length: int = 5000) -> Optional[str]:
    """
    Strip all markup from user-supplied free text before storing it.

    Returns None for empty input.
    """
    if value is None:
        return None
    cleaned = bleach.clean(value, tags=[], attributes={}, strip=True).strip()
    if len(cleaned) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")
    return cleaned or None


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def mask_sensitive_data(data: str, visible_chars: int = 4) -> str:
    """Mask sensitive data (account numbers) for logging/display"""
    if len(data) <= visible_chars:
        return "*" * len(data)

    return "*" * (len(data) - visible_chars) + data[-visible_chars:]
