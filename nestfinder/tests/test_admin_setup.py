from __future__ import annotations

from nestfinder.infrastructure.admin_setup import setup_admin_user
from nestfinder.shared.config.settings import AdminSeedConfig
from nestfinder.tests.support import DeterministicHasher, InMemoryUserRepository, make_user


def _seed(**values) -> AdminSeedConfig:
    return AdminSeedConfig(
        **{"ADMIN_USERNAME": None, "ADMIN_PASSWORD": None, "ADMIN_DISPLAY_NAME": None, **values}
    )


def test_creates_admin_on_first_start() -> None:
    users = InMemoryUserRepository()

    admin = setup_admin_user(
        _seed(ADMIN_USERNAME="Henry", ADMIN_PASSWORD="pw-123456"), users, DeterministicHasher()
    )

    assert admin is not None
    assert admin.username == "henry"
    assert admin.display_name == "Henry"
    assert admin.is_admin is True
    assert admin.password_hash == "hashed:pw-123456"


def test_promotes_existing_user() -> None:
    users = InMemoryUserRepository()
    users.add(make_user("u-1", "henry"))

    admin = setup_admin_user(_seed(ADMIN_USERNAME="henry"), users, DeterministicHasher())

    assert admin is not None
    assert admin.is_admin is True
    assert admin.password_hash == "hashed:henry-pw"


def test_skips_without_username_or_password() -> None:
    users = InMemoryUserRepository()

    assert setup_admin_user(_seed(), users, DeterministicHasher()) is None
    assert setup_admin_user(_seed(ADMIN_USERNAME="ghost"), users, DeterministicHasher()) is None
    assert users.list_all() == []
