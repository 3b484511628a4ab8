import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .models import User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        logger.error("❌ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = verify_jwt_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = (
        db.query(User)
        .filter(User.id == payload["sub"])
        .options(joinedload(User.roles))
        .first()
    )
    if not user:
        logger.warning(f"⚠️ Token subject {payload['sub']} does not match any user")
        raise HTTPException(status_code=401, detail="Authentication failed")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_role(*roles: str):
    """
    Create a dependency that only admits users holding one of the given roles.

    Example usage:
        @router.get("/admin/stats")
        async def stats(admin: User = Depends(require_role("admin"))):
            ...
    """

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"⚠️ User {user.email} with role {user.role} denied; requires {roles}")
            raise HTTPException(
                status_code=403,
                detail=f"This action requires one of the following roles: {', '.join(roles)}",
            )
        return user

    return role_checker


get_current_admin = require_role("admin")
get_current_client = require_role("client")
get_current_nanny = require_role("nanny")


optional_security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user when a bearer token is sent, None for anonymous visitors"""
    if not credentials:
        return None
    return await get_current_user(credentials, db)
