"""
Auth flow controller — register, login, password-reset request/completion.

``AuthService`` is built per request with its collaborators passed in
explicitly: a ``UserRepository``, a ``BaseNotifier`` and the ``Settings``
carrying the token secret and lifetimes.  Expected failures are raised
as ``AuthError`` subclasses; anything unexpected from the store or the
mail transport is logged and re-raised as ``InternalError``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from auth.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    UnauthorizedError,
)
from auth.jwt import ACCESS_TOKEN, RESET_TOKEN, TokenIssuer, generate_nonce
from auth.password import hash_password, verify_password
from config.settings import Settings
from database.models import User
from database.repository import DuplicateUserError, UserRepository
from notifications.base import BaseNotifier

logger = logging.getLogger(__name__)

RESET_REQUESTED = "Reset email sent successfully"
RESET_COMPLETED = "Password reset successful"


class AuthResult(BaseModel):
    user: Dict[str, Any]
    token: str


class AuthService:
    def __init__(
        self,
        repository: UserRepository,
        notifier: BaseNotifier,
        settings: Settings,
        issuer: Optional[TokenIssuer] = None,
    ) -> None:
        self.repository = repository
        self.notifier = notifier
        self.settings = settings
        self.issuer = issuer or TokenIssuer(
            settings.jwt_secret,
            auth_expiry_seconds=settings.auth_token_expiry_seconds,
            reset_expiry_seconds=settings.reset_token_expiry_seconds,
        )

    def _hash(self, password: str) -> str:
        return hash_password(password, rounds=self.settings.bcrypt_rounds)

    def _auth_result(self, user: User) -> AuthResult:
        token = self.issuer.issue_auth_token(str(user.user_id), user.username)
        return AuthResult(user=user.summary(), token=token)

    # ── Queries ─────────────────────────────────────────────────────────

    async def list_users(self) -> List[User]:
        try:
            return await self.repository.list_all()
        except Exception as exc:
            logger.exception("Listing users failed")
            raise InternalError() from exc

    async def authenticate(self, token: str) -> str:
        """Return the ``user_id`` bound to a valid access token."""
        verification = self.issuer.verify(token, expected_type=ACCESS_TOKEN)
        if not verification.is_valid:
            raise UnauthorizedError("Invalid or expired token")
        return verification.claims["sub"]

    async def get_user(self, user_id: str) -> User:
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user

    # ── Operations ──────────────────────────────────────────────────────

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        try:
            if await self.repository.find_by_username_or_email(username, email):
                raise ConflictError()
            user = await self.repository.create(username, email, self._hash(password))
        except DuplicateUserError as exc:
            raise ConflictError() from exc
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Registration failed for %s", username)
            raise InternalError() from exc

        logger.info("Registered user %s (%s)", user.username, user.user_id)
        return self._auth_result(user)

    async def login(self, username: str, password: str) -> AuthResult:
        try:
            user = await self.repository.find_by_username(username)
        except Exception as exc:
            logger.exception("Login lookup failed for %s", username)
            raise InternalError() from exc

        # Same error for unknown user and wrong password.
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError()

        logger.info("Login: %s (%s)", user.username, user.user_id)
        return self._auth_result(user)

    async def request_reset(self, email: str) -> str:
        try:
            user = await self.repository.find_by_email(email)
            if user is None:
                raise NotFoundError()

            nonce = generate_nonce(self.settings.reset_nonce_length)
            reset_token = self.issuer.issue_reset_token(user.email, nonce)
            user.reset_token = reset_token
            user.reset_token_expiry = self.issuer.expires_at(reset_token)
            # Committed before the mail goes out so a sent link always matches a stored token.
            await self.repository.save(user)

            reset_link = f"{self.settings.reset_link_base.rstrip('/')}/{reset_token}"
            await self.notifier.send_password_reset(user.email, reset_link)
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Password reset request failed for %s", email)
            raise InternalError() from exc

        logger.info("Password reset requested for user %s", user.user_id)
        return RESET_REQUESTED

    async def complete_reset(self, token: str, new_password: str) -> str:
        try:
            verification = self.issuer.verify(token, expected_type=RESET_TOKEN)
            if not verification.is_valid:
                logger.info("Rejected reset token: %s", verification.status.value)
                raise InvalidOrExpiredTokenError()

            # A superseded token still verifies; only the stored one is accepted.
            user = await self.repository.find_by_email_and_reset_token(
                verification.claims["email"], token
            )
            if user is None:
                raise InvalidOrExpiredTokenError()

            user.password_hash = self._hash(new_password)
            user.reset_token = None
            user.reset_token_expiry = None
            await self.repository.save(user)
        except InvalidOrExpiredTokenError:
            raise
        except Exception as exc:
            logger.exception("Password reset completion failed")
            raise InvalidOrExpiredTokenError() from exc

        logger.info("Password reset completed for user %s", user.user_id)
        return RESET_COMPLETED
