"""
notifications — outbound user notifications.

Provides:
  • ``BaseNotifier`` interface used by the auth service
  • ``SmtpNotifier`` for plain-text password-reset mail
"""

from notifications.base import BaseNotifier
from notifications.smtp import SmtpNotifier

__all__ = ["BaseNotifier", "SmtpNotifier"]
