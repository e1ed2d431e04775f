"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256::

    <base64url(payload)>.<hex signature>

Two kinds are issued, distinguished by the ``typ`` claim:

* ``access`` — bearer token binding ``sub`` (user id) and ``username``.
* ``reset``  — password-reset token binding ``email`` and a random nonce.

Verification never raises; it returns a ``TokenVerification`` whose
``status`` tells a valid token apart from an expired one or one whose
signature (or shape) is wrong.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import string
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

ACCESS_TOKEN = "access"
RESET_TOKEN = "reset"

_NONCE_ALPHABET = string.ascii_letters + string.digits


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"


class TokenVerification(BaseModel):
    status: TokenStatus
    claims: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


def generate_nonce(length: int = 20) -> str:
    """Random alphanumeric string used to make reset tokens unguessable."""
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).decode().rstrip("=")


def _b64decode(data: str) -> bytes:
    return urlsafe_b64decode(data + "=" * (-len(data) % 4))


class TokenIssuer:
    """Signs and verifies time-bounded tokens with a single shared secret."""

    def __init__(
        self,
        secret: str,
        auth_expiry_seconds: int = 3600,
        reset_expiry_seconds: int = 900,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret.encode()
        self.auth_expiry_seconds = auth_expiry_seconds
        self.reset_expiry_seconds = reset_expiry_seconds

    # ── Issuing ─────────────────────────────────────────────────────────

    def issue_auth_token(self, user_id: str, username: str) -> str:
        """Bearer token for ``user_id``, valid for ``auth_expiry_seconds``."""
        return self._sign(
            {"sub": str(user_id), "username": username, "typ": ACCESS_TOKEN},
            self.auth_expiry_seconds,
        )

    def issue_reset_token(self, email: str, nonce: str) -> str:
        """Single-use reset token for ``email``, valid for ``reset_expiry_seconds``."""
        return self._sign(
            {"email": email, "reset": nonce, "typ": RESET_TOKEN},
            self.reset_expiry_seconds,
        )

    def _sign(self, claims: Dict[str, Any], lifetime: int) -> str:
        now = time.time()
        payload = {**claims, "iat": now, "exp": int(now) + lifetime}
        raw = json.dumps(payload, separators=(",", ":")).encode()
        sig = hmac.new(self._secret, raw, hashlib.sha256).hexdigest()
        return _b64encode(raw) + "." + sig

    # ── Verification ────────────────────────────────────────────────────

    def _decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Signed payload of ``token``, or None if its shape or signature is wrong."""
        try:
            encoded, sig = token.split(".", 1)
            raw = _b64decode(encoded)
        except (AttributeError, ValueError):
            return None

        expected_sig = hmac.new(self._secret, raw, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(sig.encode(), expected_sig.encode()):
            return None

        try:
            payload = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(payload, dict) or not isinstance(payload.get("exp"), (int, float)):
            return None
        return payload

    def expires_at(self, token: str) -> Optional[datetime]:
        """The signed ``exp`` of ``token`` as an aware UTC datetime, even if already past."""
        payload = self._decode(token)
        if payload is None:
            return None
        return datetime.fromtimestamp(payload["exp"], timezone.utc)

    def verify(
        self,
        token: str,
        expected_type: Optional[str] = None,
    ) -> TokenVerification:
        """
        Check signature, shape and expiry of ``token``.

        A token of a different ``typ`` than ``expected_type`` is reported
        as ``INVALID_SIGNATURE`` so a reset token can never pass as a
        bearer token (and vice versa).
        """
        payload = self._decode(token)
        if payload is None:
            return TokenVerification(status=TokenStatus.INVALID_SIGNATURE)
        if expected_type is not None and payload.get("typ") != expected_type:
            return TokenVerification(status=TokenStatus.INVALID_SIGNATURE)

        if payload["exp"] <= time.time():
            return TokenVerification(status=TokenStatus.EXPIRED)
        return TokenVerification(status=TokenStatus.VALID, claims=payload)
