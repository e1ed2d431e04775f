"""
User record store.

``UserRepository`` is the small interface the auth service depends on;
``SqlAlchemyUserRepository`` backs it with an ``AsyncSession``.  Username
and e-mail uniqueness is enforced by the table's unique constraints, so a
racing duplicate insert surfaces here as ``DuplicateUserError``.

Writes commit immediately: a mutation is durable before the request
handler reports success or sends mail.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User

logger = logging.getLogger(__name__)


class DuplicateUserError(Exception):
    """The store rejected a write on its username/email uniqueness constraint."""


class UserRepository(ABC):
    """Abstract base for user record stores."""

    @abstractmethod
    async def list_all(self) -> List[User]:
        ...

    @abstractmethod
    async def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email_and_reset_token(self, email: str, reset_token: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create(self, username: str, email: str, password_hash: str) -> User:
        """Insert and commit a new record.  Raises ``DuplicateUserError`` on a uniqueness clash."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Persist and commit mutated fields of an existing record."""
        ...


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _first(self, stmt) -> Optional[User]:
        result = await self._session.execute(stmt.limit(1))
        return result.scalars().first()

    async def list_all(self) -> List[User]:
        result = await self._session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        return await self._first(
            select(User).where(or_(User.username == username, User.email == email))
        )

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email))

    async def find_by_email_and_reset_token(self, email: str, reset_token: str) -> Optional[User]:
        return await self._first(
            select(User).where(User.email == email, User.reset_token == reset_token)
        )

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        return await self._session.get(User, uid)

    async def create(self, username: str, email: str, password_hash: str) -> User:
        user = User(
            user_id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
        )
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Rejected duplicate registration for %s", username)
            raise DuplicateUserError(str(exc.orig)) from exc
        return user

    async def save(self, user: User) -> None:
        self._session.add(user)
        await self._session.commit()
