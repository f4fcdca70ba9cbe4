from datetime import datetime, timedelta, timezone

import jwt
import pytest

from enums import ErrorCode
from infra.token_provider import TokenProvider, TokenStatus
from security import BusinessError

SECRET = "a" * 32
OTHER_SECRET = "b" * 32


def _clock_at(moment):
    return lambda: moment


def test_rejects_short_secret():
    with pytest.raises(ValueError):
        TokenProvider("too-short", 3600)


def test_rejects_non_positive_lifetime():
    with pytest.raises(ValueError):
        TokenProvider(SECRET, 0)


def test_from_config_reads_keys():
    provider = TokenProvider.from_config(
        {"JWT_SECRET": SECRET, "JWT_EXP_SECONDS": 120, "JWT_ALGORITHM": "HS256"}
    )
    assert provider.expiration_seconds == 120


def test_generate_token_claims():
    issued = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    provider = TokenProvider(SECRET, 3600, clock=_clock_at(issued))

    token = provider.generate_token("user@example.com", ["ROLE_USER"])
    claims = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})

    assert claims["sub"] == "user@example.com"
    assert claims["authorities"] == ["ROLE_USER"]
    assert claims["iat"] == int(issued.timestamp())
    assert claims["exp"] == int(issued.timestamp()) + 3600


def test_fresh_token_is_valid():
    provider = TokenProvider(SECRET, 3600)
    token = provider.generate_token("user@example.com", ["ROLE_ADMIN"])

    assert provider.inspect(token) == TokenStatus.VALID
    assert provider.is_valid(token)
    assert provider.is_valid(token, "user@example.com")
    assert not provider.is_valid(token, "someone@example.com")
    assert provider.extract_subject(token) == "user@example.com"
    assert provider.extract_authorities(token) == ["ROLE_ADMIN"]


def test_expired_token_still_has_valid_signature():
    issued = datetime.now(timezone.utc) - timedelta(seconds=2)
    provider = TokenProvider(SECRET, 1, clock=_clock_at(issued))
    token = provider.generate_token("user@example.com", ["ROLE_USER"])

    assert provider.inspect(token) == TokenStatus.EXPIRED
    assert provider.is_valid(token) is False
    assert provider.has_valid_signature(token) is True

    with pytest.raises(BusinessError) as excinfo:
        provider.decode(token)
    assert excinfo.value.error_code == ErrorCode.EXPIRED_TOKEN


def test_token_signed_with_other_key_is_invalid():
    token = TokenProvider(OTHER_SECRET, 3600).generate_token("user@example.com", [])
    provider = TokenProvider(SECRET, 3600)

    assert provider.inspect(token) == TokenStatus.INVALID
    assert provider.has_valid_signature(token) is False
    with pytest.raises(BusinessError) as excinfo:
        provider.extract_subject(token)
    assert excinfo.value.error_code == ErrorCode.INVALID_TOKEN
    assert excinfo.value.status == 401


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_invalid(token):
    provider = TokenProvider(SECRET, 3600)
    assert provider.inspect(token) == TokenStatus.INVALID
    assert provider.is_valid(token) is False
    with pytest.raises(BusinessError) as excinfo:
        provider.decode(token)
    assert excinfo.value.code == "A001"


def test_token_missing_expiry_is_invalid():
    token = jwt.encode({"sub": "user@example.com", "iat": 0}, SECRET, algorithm="HS256")
    assert TokenProvider(SECRET, 3600).inspect(token) == TokenStatus.INVALID
