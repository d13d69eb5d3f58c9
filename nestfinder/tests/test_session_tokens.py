from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from nestfinder.application.services.session_tokens import JwtSessionTokenCodec
from nestfinder.domain.users.entities import IdentityClaim

SECRET = "unit-test-secret-0123456789abcdef0123456789"
ISSUED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
CLAIM = IdentityClaim(user_id="u-1", username="henry", is_admin=True)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(ISSUED_AT)


@pytest.fixture()
def codec(clock: FrozenClock) -> JwtSessionTokenCodec:
    return JwtSessionTokenCodec(SECRET, clock=clock)


def test_issue_then_verify_returns_claim(codec: JwtSessionTokenCodec) -> None:
    assert codec.verify(codec.issue(CLAIM)) == CLAIM


def test_payload_shape(codec: JwtSessionTokenCodec) -> None:
    token = codec.issue(CLAIM)

    header = jwt.get_unverified_header(token)
    payload = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})

    assert header["alg"] == "HS256"
    assert payload == {
        "userId": "u-1",
        "username": "henry",
        "isAdmin": True,
        "exp": int((ISSUED_AT + timedelta(days=7)).timestamp()),
    }


def test_token_valid_until_expiry(codec: JwtSessionTokenCodec, clock: FrozenClock) -> None:
    token = codec.issue(CLAIM)

    clock.now = ISSUED_AT + timedelta(days=7) - timedelta(seconds=1)
    assert codec.verify(token) == CLAIM

    clock.now = ISSUED_AT + timedelta(days=7)
    assert codec.verify(token) is None

    clock.now = ISSUED_AT + timedelta(days=30)
    assert codec.verify(token) is None


def test_tampered_signature_is_invalid(codec: JwtSessionTokenCodec) -> None:
    header, payload, signature = codec.issue(CLAIM).split(".")
    first = "B" if signature[0] != "B" else "C"

    assert codec.verify(f"{header}.{payload}.{first}{signature[1:]}") is None


def test_other_secret_is_invalid(codec: JwtSessionTokenCodec, clock: FrozenClock) -> None:
    other = JwtSessionTokenCodec("another-secret-0123456789abcdef0123456", clock=clock)

    assert codec.verify(other.issue(CLAIM)) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "henry", "isAdmin": True},
        {"userId": "u-1", "isAdmin": True},
        {"userId": "u-1", "username": "henry", "isAdmin": "yes"},
        {"userId": "", "username": "henry", "isAdmin": False},
    ],
)
def test_wrong_claim_shape_is_invalid(codec: JwtSessionTokenCodec, payload: dict) -> None:
    payload = {**payload, "exp": int((ISSUED_AT + timedelta(hours=1)).timestamp())}
    token = jwt.encode(payload, SECRET, algorithm="HS256")

    assert codec.verify(token) is None


def test_token_without_expiry_is_invalid(codec: JwtSessionTokenCodec) -> None:
    token = jwt.encode({"userId": "u-1", "username": "henry", "isAdmin": True}, SECRET, algorithm="HS256")

    assert codec.verify(token) is None


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_invalid(codec: JwtSessionTokenCodec, token: str) -> None:
    assert codec.verify(token) is None


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        JwtSessionTokenCodec("")
