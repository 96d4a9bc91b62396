"""User domain service: register, login, refresh.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
)
from src.ss_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ss_gateway.auth.password import hash_password, verify_password
from src.ss_gateway.user.db_models import UserModel


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(self, email: str, password: str, db: AsyncSession) -> UserModel:
        """Create a user. New users have no entitlement until they subscribe."""
        email = email.lower()
        result = await db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email)
        )
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.flush()  # populate server defaults without committing
        await db.refresh(user)
        return user

    async def login(
        self, email: str, password: str, db: AsyncSession
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError
        to prevent account enumeration.
        """
        result = await db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
