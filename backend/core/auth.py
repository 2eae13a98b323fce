import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.exceptions import InvalidPasswordException
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.database import get_async_session
from db.users import User

logger = logging.getLogger(__name__)
reset_token_logger = logging.getLogger(f"{__name__}.reset_tokens")

MIN_PASSWORD_LENGTH = 6


async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.jwt_secret
    verification_token_secret = settings.jwt_secret

    async def validate_password(self, password: str, user) -> None:
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info("User %s registered with role %s", user.id, user.role)

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        # No mailer is wired up; operators read the token from this channel
        # and pass it to the user, who then calls /auth/reset-password.
        reset_token_logger.info(
            "Password reset token for %s: %s",
            user.email,
            token,
            extra={"user_id": str(user.id), "reset_token": token},
        )

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info("Password reset completed for user %s", user.id)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(secret=settings.jwt_secret, lifetime_seconds=settings.jwt_lifetime_seconds)


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)
