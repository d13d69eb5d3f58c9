from __future__ import annotations

import pytest

from nestfinder.application.use_cases.admin.create_user import CreateUserUseCase
from nestfinder.application.use_cases.admin.delete_user import DeleteUserUseCase
from nestfinder.application.use_cases.admin.list_users import ListUsersUseCase
from nestfinder.application.use_cases.admin.update_user import UpdateUserUseCase
from nestfinder.application.use_cases.users.change_password import ChangePasswordUseCase
from nestfinder.application.use_cases.users.current_user import GetCurrentUserUseCase
from nestfinder.application.use_cases.users.login_user import LoginUserUseCase
from nestfinder.domain.users.entities import IdentityClaim
from nestfinder.domain.users.exceptions import (
    CannotDeleteSelfError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from nestfinder.domain.users.repositories import SessionTokenCodec
from nestfinder.shared.errors import ValidationError
from nestfinder.tests.support import DeterministicHasher, InMemoryUserRepository, make_user


class RecordingCodec(SessionTokenCodec):
    def __init__(self) -> None:
        self.issued: list[IdentityClaim] = []

    def issue(self, claim: IdentityClaim) -> str:
        self.issued.append(claim)
        return f"token-{claim.user_id}"

    def verify(self, token: str) -> IdentityClaim | None:
        return None


@pytest.fixture()
def users() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    repo.add(make_user("u-henry", "henry", is_admin=True))
    repo.add(make_user("u-zoey", "zoey", offset=5))
    return repo


def test_login_normalizes_username_and_issues_token(users: InMemoryUserRepository) -> None:
    codec = RecordingCodec()
    use_case = LoginUserUseCase(users=users, tokens=codec, password_hasher=DeterministicHasher())

    result = use_case.execute("  Henry ", "henry-pw")

    assert result.user.id == "u-henry"
    assert result.token == "token-u-henry"
    assert codec.issued == [IdentityClaim(user_id="u-henry", username="henry", is_admin=True)]


@pytest.mark.parametrize("username,password", [("henry", "wrong"), ("nobody", "henry-pw")])
def test_login_rejects_bad_credentials(
    users: InMemoryUserRepository, username: str, password: str
) -> None:
    use_case = LoginUserUseCase(
        users=users, tokens=RecordingCodec(), password_hasher=DeterministicHasher()
    )

    with pytest.raises(InvalidCredentialsError):
        use_case.execute(username, password)


def test_login_with_unreadable_hash_is_invalid_credentials(
    users: InMemoryUserRepository,
) -> None:
    users.update("u-zoey", password_hash="$legacy$abc")
    use_case = LoginUserUseCase(
        users=users, tokens=RecordingCodec(), password_hasher=DeterministicHasher()
    )

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("zoey", "zoey-pw")


def test_current_user_reads_live_record(users: InMemoryUserRepository) -> None:
    users.update("u-zoey", display_name="Zoey B.", is_admin=True)
    stale_claim = IdentityClaim(user_id="u-zoey", username="zoey", is_admin=False)

    user = GetCurrentUserUseCase(users).execute(stale_claim)

    assert user is not None
    assert user.display_name == "Zoey B."
    assert user.is_admin is True


def test_current_user_without_claim_or_record(users: InMemoryUserRepository) -> None:
    use_case = GetCurrentUserUseCase(users)

    assert use_case.execute(None) is None
    assert use_case.execute(IdentityClaim(user_id="gone", username="gone", is_admin=False)) is None


def test_change_password(users: InMemoryUserRepository) -> None:
    ChangePasswordUseCase(users=users, password_hasher=DeterministicHasher()).execute(
        "u-zoey", "zoey-pw", "new-password"
    )

    assert users.find_by_id("u-zoey").password_hash == "hashed:new-password"


def test_change_password_requires_current(users: InMemoryUserRepository) -> None:
    use_case = ChangePasswordUseCase(users=users, password_hasher=DeterministicHasher())

    with pytest.raises(ValidationError) as exc_info:
        use_case.execute("u-zoey", "not-it", "new-password")

    assert exc_info.value.code == "invalid_current_password"
    assert users.find_by_id("u-zoey").password_hash == "hashed:zoey-pw"


def test_create_user_normalizes_and_defaults_display_name(
    users: InMemoryUserRepository,
) -> None:
    user = CreateUserUseCase(users=users, password_hasher=DeterministicHasher()).execute(
        " Alex ", "alex-password"
    )

    assert user.username == "alex"
    assert user.display_name == "Alex"
    assert user.is_admin is False
    assert user.password_hash == "hashed:alex-password"
    assert users.find_by_username("alex") == user


def test_create_user_rejects_duplicate(users: InMemoryUserRepository) -> None:
    use_case = CreateUserUseCase(users=users, password_hasher=DeterministicHasher())

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("ZOEY", "another-password")


def test_list_users_ordered_by_creation(users: InMemoryUserRepository) -> None:
    users.add(make_user("u-early", "early", offset=-10))

    listed = ListUsersUseCase(users).execute()

    assert [u.username for u in listed] == ["early", "henry", "zoey"]


def test_update_user(users: InMemoryUserRepository) -> None:
    use_case = UpdateUserUseCase(users=users, password_hasher=DeterministicHasher())

    user = use_case.execute("u-zoey", is_admin=True, password="fresh-password")

    assert user.is_admin is True
    assert user.password_hash == "hashed:fresh-password"
    with pytest.raises(UserNotFoundError):
        use_case.execute("missing", display_name="x")


def test_delete_user(users: InMemoryUserRepository) -> None:
    use_case = DeleteUserUseCase(users)

    with pytest.raises(CannotDeleteSelfError):
        use_case.execute("u-henry", acting_user_id="u-henry")

    use_case.execute("u-zoey", acting_user_id="u-henry")
    assert users.find_by_id("u-zoey") is None

    with pytest.raises(UserNotFoundError):
        use_case.execute("u-zoey", acting_user_id="u-henry")
