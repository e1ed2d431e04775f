"""
BaseNotifier — abstract interface for delivering account notifications.

The auth service only needs one message today: the password-reset link.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

RESET_SUBJECT = "Password Reset Request"


def reset_body(reset_link: str) -> str:
    return f"Click the link to reset your password: {reset_link}"


class BaseNotifier(ABC):
    """Abstract base for notification transports."""

    @abstractmethod
    async def send_password_reset(self, to_email: str, reset_link: str) -> None:
        """
        Deliver ``reset_link`` to ``to_email``.

        Implementations raise on delivery failure; the caller does not retry.
        """
        ...
