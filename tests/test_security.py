from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from errors import Unauthorized
from security import TokenIssuer, hash_password, verify_password


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_user_id_and_ten_hour_expiry():
    issuer = TokenIssuer("k")
    token = issuer.issue(42)

    claims = jwt.get_unverified_claims(token)
    assert claims["userId"] == 42
    assert claims["exp"] - claims["iat"] == 10 * 3600
    assert issuer.verify(token) == 42


def test_expired_token_is_rejected():
    issuer = TokenIssuer("k")
    token = issuer.issue(1, now=datetime.now(timezone.utc) - timedelta(hours=11))

    with pytest.raises(Unauthorized) as info:
        issuer.verify(token)
    assert "expired" in info.value.message.lower()


def test_token_signed_with_other_secret_is_rejected():
    token = TokenIssuer("other").issue(1)
    with pytest.raises(Unauthorized):
        TokenIssuer("k").verify(token)


def test_malformed_token_is_rejected():
    with pytest.raises(Unauthorized):
        TokenIssuer("k").verify("not-a-token")


def test_token_without_user_id_is_rejected():
    token = jwt.encode({"sub": "1"}, "k", algorithm="HS256")
    with pytest.raises(Unauthorized):
        TokenIssuer("k").verify(token)
