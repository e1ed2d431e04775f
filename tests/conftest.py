"""
Shared fixtures: an in-memory user store and a notifier that records sends.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from auth.service import AuthService
from config.settings import Settings
from database.models import User
from database.repository import DuplicateUserError, UserRepository
from notifications.base import BaseNotifier


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self.users: List[User] = []
        self.saves = 0

    async def list_all(self):
        return list(self.users)

    async def find_by_username_or_email(self, username, email):
        return next((u for u in self.users if u.username == username or u.email == email), None)

    async def find_by_username(self, username):
        return next((u for u in self.users if u.username == username), None)

    async def find_by_email(self, email):
        return next((u for u in self.users if u.email == email), None)

    async def find_by_email_and_reset_token(self, email, reset_token):
        return next(
            (u for u in self.users if u.email == email and u.reset_token == reset_token),
            None,
        )

    async def get_by_id(self, user_id) -> Optional[User]:
        return next((u for u in self.users if str(u.user_id) == str(user_id)), None)

    async def create(self, username, email, password_hash):
        if any(u.username == username or u.email == email for u in self.users):
            raise DuplicateUserError(username)
        now = datetime.now(timezone.utc)
        user = User(
            user_id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users.append(user)
        return user

    async def save(self, user):
        user.updated_at = datetime.now(timezone.utc)
        self.saves += 1


class RecordingNotifier(BaseNotifier):
    def __init__(self):
        self.sent = []

    async def send_password_reset(self, to_email, reset_link):
        self.sent.append((to_email, reset_link))


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        reset_link_base="http://testserver/api/reset-password",
    )


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(repository, notifier, settings):
    return AuthService(repository, notifier, settings)
