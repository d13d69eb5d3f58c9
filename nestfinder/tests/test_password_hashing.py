from __future__ import annotations

import pytest

from nestfinder.application.services.password_hashing import BcryptPasswordHasher
from nestfinder.domain.users.exceptions import HashFormatError


@pytest.fixture(scope="module")
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.mark.parametrize("password", ["hunter22", "Pässwörd with spaces", "x" * 72])
def test_hash_then_verify(hasher: BcryptPasswordHasher, password: str) -> None:
    digest = hasher.hash(password)

    assert digest != password
    assert digest.startswith("$2")
    assert hasher.verify(password, digest) is True
    assert hasher.verify(password + "!", digest) is False


def test_hash_is_salted(hasher: BcryptPasswordHasher) -> None:
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_verify_rejects_unparseable_digest(hasher: BcryptPasswordHasher) -> None:
    with pytest.raises(HashFormatError):
        hasher.verify("anything", "not-a-bcrypt-digest")


def test_password_over_72_bytes(hasher: BcryptPasswordHasher) -> None:
    digest = hasher.hash("x" * 72)

    with pytest.raises(ValueError):
        hasher.hash("x" * 73)
    assert hasher.verify("x" * 73, digest) is False
