"""FastAPI dependencies for authentication and access gating.

Usage in any protected router:
    from src.ss_gateway.auth.dependencies import get_current_user, require_entitlement

    @router.post("/shows")
    async def save(user: UserModel = Depends(require_entitlement)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ss_common.database import get_db_session
from src.ss_common.errors import (
    AccountDisabledError,
    AdminRequiredError,
    InvalidCredentialsError,
    SubscriptionRequiredError,
)
from src.ss_entitlement.application.service import EntitlementService
from src.ss_gateway.auth.jwt_handler import decode_token
from src.ss_gateway.user.db_models import UserModel

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_entitlements = EntitlementService()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    Raises AccountDisabledError if the user account is disabled.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        user_id = uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


async def require_entitlement(
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Paywall gate. Re-checks the entitlement row on every request (no cache)."""
    if not await _entitlements.has_access(db, str(current_user.id)):
        raise SubscriptionRequiredError()
    return current_user


async def require_admin(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Caller must be listed in ADMIN_USER_IDS."""
    if str(current_user.id) not in settings.admin_user_ids:
        raise AdminRequiredError()
    return current_user
