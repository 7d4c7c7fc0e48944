import base64
import json
from datetime import datetime, timezone

import pytest

from arbatai.backoffice.auth import COOKIE_NAME, SESSION_TTL_MS, BackofficeAuth
from arbatai.config import Settings
from arbatai.errors import ConfigurationError


NOW = 1_700_000_000.0
NOW_MS = int(NOW * 1000)


@pytest.fixture
def auth():
    return BackofficeAuth(Settings(backoffice_password="s3cret"), clock=lambda: NOW)


def test_verify_password(auth):
    assert auth.verify_password("s3cret")
    assert not auth.verify_password("s3cret ")
    assert not auth.verify_password("")


def test_missing_password_is_a_configuration_error():
    auth = BackofficeAuth(Settings())
    with pytest.raises(ConfigurationError):
        auth.verify_password("anything")
    with pytest.raises(ConfigurationError):
        auth.issue_session()


def test_issued_session_round_trips(auth):
    cookie = auth.issue_session()
    assert cookie.name == COOKIE_NAME
    assert cookie.path == "/backoffice"
    assert cookie.httponly and cookie.samesite == "strict"
    assert cookie.secure is False
    assert cookie.expires == datetime.fromtimestamp((NOW_MS + SESSION_TTL_MS) / 1000, tz=timezone.utc)
    assert auth.is_authenticated(cookie.value)


def test_token_format(auth):
    data, sig = auth.encode_token(123).split(".")
    assert "=" not in data + sig
    assert json.loads(base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))) == {"exp": 123}


def test_session_expires(auth):
    value = auth.issue_session().value
    later = BackofficeAuth(auth.settings, clock=lambda: NOW + SESSION_TTL_MS / 1000)
    assert not later.is_authenticated(value)


def test_expired_token_is_rejected(auth):
    assert not auth.is_authenticated(auth.encode_token(NOW_MS - 1))
    assert not auth.is_authenticated(auth.encode_token(NOW_MS))
    assert auth.is_authenticated(auth.encode_token(NOW_MS + 1))


def test_tampered_payload_is_rejected(auth):
    data, sig = auth.encode_token(NOW_MS + 10 ** 12).split(".")
    raw = bytearray(base64.urlsafe_b64decode(data + "=" * (-len(data) % 4)))
    raw[-2] ^= 0x01
    forged = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode()
    assert not auth.is_authenticated(f"{forged}.{sig}")


def test_token_signed_with_other_secret_is_rejected(auth):
    other = BackofficeAuth(Settings(backoffice_password="other"), clock=lambda: NOW)
    assert not auth.is_authenticated(other.encode_token(NOW_MS + 1000))


def test_session_secret_overrides_password():
    settings = Settings(backoffice_password="pw", backoffice_session_secret="signing-key")
    auth = BackofficeAuth(settings, clock=lambda: NOW)
    by_password = BackofficeAuth(Settings(backoffice_password="pw"), clock=lambda: NOW)
    token = auth.encode_token(NOW_MS + 1000)
    assert auth.is_authenticated(token)
    assert not by_password.is_authenticated(token)


@pytest.mark.parametrize(
    "value",
    [None, "", "nodot", "a.b.c", "!!!.???", "e30.", ".abc"],
)
def test_malformed_cookies_are_rejected(auth, value):
    assert auth.is_authenticated(value) is False


def test_validly_signed_garbage_payload_is_rejected(auth):
    for payload in (b"not json", b'{"exp": "soon"}', b"[1]", b'{"exp": true}'):
        data = base64.urlsafe_b64encode(payload).rstrip(b"=").decode()
        sig = base64.urlsafe_b64encode(auth._sign(data)).rstrip(b"=").decode()
        assert auth.is_authenticated(f"{data}.{sig}") is False


def test_clear_session(auth):
    cookie = auth.clear_session()
    assert cookie.value == ""
    assert cookie.expires == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_production_cookie_is_secure():
    settings = Settings.from_env({"BACKOFFICE_PASSWORD": "pw", "APP_ENV": "production"})
    assert BackofficeAuth(settings).issue_session().secure is True
