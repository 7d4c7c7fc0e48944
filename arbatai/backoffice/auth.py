"""
Cookie-based session authentication for the backoffice.

There is no session table. After a successful login the browser gets a
self-contained token ``<payload>.<signature>``, where ``payload`` is the
base64url-encoded JSON ``{"exp": <ms since epoch>}`` and ``signature`` is
an HMAC-SHA256 of the encoded payload, also base64url-encoded. The
signing key is ``BACKOFFICE_SESSION_SECRET`` or, when that is unset, the
admin password itself, so changing the password logs everyone out.

Invalid tokens never raise; ``is_authenticated`` just answers ``False``
and the caller decides what to do. A missing password is a configuration
problem and raises ``ConfigurationError``.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Response

from ..config import Settings


COOKIE_NAME = "arbatai_backoffice"
COOKIE_PATH = "/backoffice"
SESSION_TTL_MS = 1000 * 60 * 60 * 24 * 30  # 30 days


@dataclass(frozen=True)
class SessionCookie:
    """Everything needed to set (or clear) the session cookie."""

    value: str
    expires: datetime
    secure: bool
    name: str = COOKIE_NAME
    path: str = COOKIE_PATH
    httponly: bool = True
    samesite: str = "strict"


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _sha256(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


def _ms_to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


class BackofficeAuth:
    def __init__(self, settings: Settings, clock: Callable[[], float] = time.time):
        self.settings = settings
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _sign(self, data: str) -> bytes:
        key = self.settings.session_secret().encode("utf-8")
        return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()

    def verify_password(self, candidate: str) -> bool:
        # Hash both sides first so the comparison is over equal-length digests.
        expected = self.settings.require_password()
        return hmac.compare_digest(_sha256(candidate or ""), _sha256(expected))

    def encode_token(self, exp_ms: int) -> str:
        payload = json.dumps({"exp": exp_ms}, separators=(",", ":")).encode("utf-8")
        data = _b64url_encode(payload)
        return f"{data}.{_b64url_encode(self._sign(data))}"

    def issue_session(self) -> SessionCookie:
        exp = self._now_ms() + SESSION_TTL_MS
        return SessionCookie(
            value=self.encode_token(exp),
            expires=_ms_to_datetime(exp),
            secure=self.settings.cookie_secure,
        )

    def clear_session(self) -> SessionCookie:
        return SessionCookie(
            value="",
            expires=_ms_to_datetime(0),
            secure=self.settings.cookie_secure,
        )

    def is_authenticated(self, cookie_value: Optional[str]) -> bool:
        if not cookie_value:
            return False

        parts = cookie_value.split(".")
        if len(parts) != 2:
            return False
        data, signature = parts

        expected = self._sign(data)
        try:
            actual = _b64url_decode(signature)
        except (binascii.Error, ValueError):
            return False
        if not hmac.compare_digest(actual, expected):
            return False

        try:
            payload = json.loads(_b64url_decode(data).decode("utf-8"))
        except (binascii.Error, ValueError):
            return False
        if not isinstance(payload, dict):
            return False
        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return False
        return exp > self._now_ms()

    @staticmethod
    def apply_cookie(response: Response, cookie: SessionCookie) -> None:
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            expires=cookie.expires,
            path=cookie.path,
            secure=cookie.secure,
            httponly=cookie.httponly,
            samesite=cookie.samesite,
        )
