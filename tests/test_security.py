from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest
from jose import jwt

from tomato.core.exceptions import AuthenticationError
from tomato.core.security import _dummy_hash, create_token, decode_token, hash_password, verify_password
from tomato.dependencies import extract_token


def test_password_hash_round_trip():
    hashed = hash_password("supersecret", rounds=4)

    assert hashed != "supersecret"
    assert hashed.startswith("$2")
    assert verify_password("supersecret", hashed)
    assert not verify_password("supersecret!", hashed)


def test_password_hashes_are_salted():
    assert hash_password("supersecret", rounds=4) != hash_password("supersecret", rounds=4)


def test_verify_password_without_hash_is_false():
    assert verify_password("anything", None) is False


def test_malformed_stored_hash_is_false():
    assert verify_password("supersecret", "not-a-bcrypt-hash") is False


def test_hash_password_refuses_over_72_bytes():
    with pytest.raises(ValueError):
        hash_password("é" * 37, rounds=4)


@pytest.mark.parametrize("hashed", [None, "stored"])
def test_verify_password_over_72_bytes_is_false(hashed):
    if hashed == "stored":
        hashed = hash_password("x" * 72, rounds=4)

    assert verify_password("x" * 80, hashed, rounds=4) is False


@pytest.mark.parametrize("rounds", [4, 5])
def test_dummy_hash_uses_configured_cost(rounds):
    with mock.patch("tomato.core.security.bcrypt.checkpw", return_value=False) as checkpw:
        assert verify_password("supersecret", None, rounds=rounds) is False

    dummy = checkpw.call_args.args[1]
    assert dummy.startswith(f"$2b${rounds:02d}$".encode())


def test_dummy_hash_defaults_to_production_cost():
    assert _dummy_hash(10).startswith(b"$2b$10$")


def test_token_carries_user_id_and_expires_in_seven_days(settings):
    before = datetime.now(timezone.utc)
    token = create_token(42, settings)

    claims = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)

    assert claims["id"] == 42
    assert timedelta(days=7) - timedelta(seconds=5) <= expires - before <= timedelta(days=7, seconds=5)
    assert decode_token(token, settings) == 42


def test_expired_token_is_rejected(settings):
    token = create_token(42, settings, expires_delta=timedelta(seconds=-1))

    with pytest.raises(AuthenticationError):
        decode_token(token, settings)


def test_token_signed_with_other_secret_is_rejected(settings):
    token = create_token(42, settings.model_copy(update={"jwt_secret": "another-secret"}))

    with pytest.raises(AuthenticationError):
        decode_token(token, settings)


def test_token_without_user_id_is_rejected(settings):
    token = jwt.encode({"sub": "42"}, settings.jwt_secret, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        decode_token(token, settings)


@pytest.mark.parametrize(
    "authorization,token,expected",
    [
        ("Bearer abc", None, "abc"),
        ("bearer abc", None, "abc"),
        (None, "abc", "abc"),
        (None, "  abc ", "abc"),
        ("Basic abc", None, None),
        ("Bearer", None, None),
        (None, "", None),
        (None, None, None),
    ],
)
def test_extract_token(authorization, token, expected):
    assert extract_token(authorization, token) == expected
