"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_auth_service`` and ``get_current_user_id``.
Tests swap ``get_user_repository`` / ``get_notifier`` / ``get_settings``
through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import UnauthorizedError
from auth.service import AuthService
from config.settings import Settings, config
from database.repository import SqlAlchemyUserRepository, UserRepository
from database.session import get_db_session
from notifications.base import BaseNotifier
from notifications.smtp import SmtpNotifier

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings() -> Settings:
    return config


async def get_user_repository(
    session: AsyncSession = Depends(db_session),
) -> UserRepository:
    return SqlAlchemyUserRepository(session)


def get_notifier(settings: Settings = Depends(get_settings)) -> BaseNotifier:
    return SmtpNotifier(settings)


async def get_auth_service(
    repository: UserRepository = Depends(get_user_repository),
    notifier: BaseNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(repository, notifier, settings)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).
    """
    if credentials is None:
        raise UnauthorizedError("Missing Bearer token")
    return await service.authenticate(credentials.credentials)
