# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from nestfinder.application.services.password_hashing import BcryptPasswordHasher
from nestfinder.application.services.session_tokens import JwtSessionTokenCodec
from nestfinder.application.use_cases.admin.create_user import CreateUserUseCase
from nestfinder.application.use_cases.admin.delete_user import DeleteUserUseCase
from nestfinder.application.use_cases.admin.list_users import ListUsersUseCase
from nestfinder.application.use_cases.admin.update_user import UpdateUserUseCase
from nestfinder.application.use_cases.users.change_password import ChangePasswordUseCase
from nestfinder.application.use_cases.users.current_user import GetCurrentUserUseCase
from nestfinder.application.use_cases.users.login_user import LoginUserUseCase
from nestfinder.infrastructure.auth.session_cookie import SessionCookie
from nestfinder.infrastructure.geocoding import DisabledGeocoder, GeocoderPort, NominatimGeocoder
from nestfinder.infrastructure.repositories.users import SqlAlchemyUserRepository
from nestfinder.infrastructure.scraper import DisabledScraper, HtmlScraper, ScraperPort
from nestfinder.infrastructure.storage import LocalObjectStorage
from nestfinder.interfaces.http.controllers.admin_controller import AdminController
from nestfinder.interfaces.http.controllers.auth_controller import AuthController
from nestfinder.interfaces.http.controllers.household_controller import HouseholdController
from nestfinder.interfaces.http.controllers.listings_controller import ListingsController
from nestfinder.interfaces.http.controllers.misc_controller import MiscController
from nestfinder.interfaces.http.controllers.viewings_controller import ViewingsController
from nestfinder.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    # Auth core

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher()

    @cached_property
    def token_codec(self) -> JwtSessionTokenCodec:
        return JwtSessionTokenCodec(self.config.signing_secret)

    @cached_property
    def session_cookie(self) -> SessionCookie:
        return SessionCookie(secure=self.config.is_production())

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    # Collaborators

    @cached_property
    def storage(self) -> LocalObjectStorage:
        storage = self.config.storage
        return LocalObjectStorage(
            storage.directory,
            public_url=storage.public_url,
            bucket=storage.bucket,
            max_bytes=storage.max_upload_bytes,
        )

    @cached_property
    def geocoder(self) -> GeocoderPort:
        geo = self.config.geocoding
        if not geo.enabled:
            return DisabledGeocoder()
        return NominatimGeocoder(
            url=geo.url,
            user_agent=geo.user_agent,
            country_codes=geo.country_codes,
            timeout=geo.timeout,
        )

    @cached_property
    def scraper(self) -> ScraperPort:
        scraper = self.config.scraper
        if not scraper.enabled:
            return DisabledScraper()
        return HtmlScraper(
            user_agent=scraper.user_agent,
            timeout=scraper.timeout,
            max_chars=scraper.max_chars,
        )

    # Use cases

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_codec,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(self.user_repository)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def admin_controller(self) -> AdminController:
        return AdminController(
            list_users=ListUsersUseCase(self.user_repository),
            create_user=CreateUserUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            update_user=UpdateUserUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            delete_user=DeleteUserUseCase(self.user_repository),
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            current_user_use_case=self.current_user_use_case,
            change_password_use_case=self.change_password_use_case,
        )

    @cached_property
    def listings_controller(self) -> ListingsController:
        return ListingsController(
            geocoder=self.geocoder, scraper=self.scraper, storage=self.storage
        )

    @cached_property
    def viewings_controller(self) -> ViewingsController:
        return ViewingsController(storage=self.storage)

    @cached_property
    def household_controller(self) -> HouseholdController:
        return HouseholdController()

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(uploads_dir=self.storage.root)


container = Container()
