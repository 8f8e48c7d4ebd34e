from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Cookie, Depends, Header, HTTPException

from app.application.ports.accounts_port import AccountsPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.application.ports.token_port import TokenPort
from app.application.use_cases.change_password import ChangePasswordUseCase
from app.application.use_cases.delete_user import DeleteUserUseCase
from app.application.use_cases.get_me import GetMeUseCase
from app.application.use_cases.get_user_profile import GetUserProfileUseCase
from app.application.use_cases.login import LoginUseCase
from app.application.use_cases.logout_session import LogoutSessionUseCase
from app.application.use_cases.lookup_user import LookupUserUseCase
from app.application.use_cases.refresh_session import RefreshSessionUseCase
from app.application.use_cases.register_user import RegisterUserUseCase
from app.application.use_cases.update_account_details import UpdateAccountDetailsUseCase
from app.domain.entities.user import User
from app.domain.exceptions import ConfigurationError, TokenExpiredError, UnauthorizedError
from app.infrastructure.db.engine import get_engine
from app.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from app.infrastructure.security.password_hasher import PasswordHasher
from app.infrastructure.security.token_service import JwtTokenService
from app.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)

ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"


def _get_db_engine():
    settings = get_settings()
    if not settings.database_url:
        raise HTTPException(status_code=500, detail="Database is not configured.")
    return get_engine(settings.database_url)


def get_accounts_repository() -> AccountsPort:
    return SqlAccountsRepository(_get_db_engine())


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasherPort:
    settings = get_settings()
    return PasswordHasher(rounds=settings.password_hash_rounds)


@lru_cache(maxsize=1)
def _build_token_service() -> JwtTokenService:
    settings = get_settings()
    return JwtTokenService(
        access_secret=settings.access_token_secret,
        refresh_secret=settings.refresh_token_secret,
        access_ttl_minutes=settings.access_token_ttl_minutes,
        refresh_ttl_days=settings.refresh_token_ttl_days,
        algorithm=settings.jwt_algorithm,
    )


def get_token_service() -> TokenPort:
    try:
        return _build_token_service()
    except ConfigurationError as exc:
        logger.error("deps: token_service_misconfigured detail=%s", exc)
        raise HTTPException(status_code=500, detail="Token signing is not configured.") from exc


def get_register_user_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(accounts_port=accounts_port, password_hasher=password_hasher)


def get_login_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginUseCase:
    return LoginUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_refresh_session_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    token_port: TokenPort = Depends(get_token_service),
) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(accounts_port=accounts_port, token_port=token_port)


def get_logout_session_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> LogoutSessionUseCase:
    return LogoutSessionUseCase(accounts_port=accounts_port)


def get_change_password_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(
        accounts_port=accounts_port,
        password_hasher=password_hasher,
        revoke_sessions=settings.revoke_sessions_on_password_change,
    )


def get_get_me_use_case() -> GetMeUseCase:
    return GetMeUseCase()


def get_update_account_details_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> UpdateAccountDetailsUseCase:
    return UpdateAccountDetailsUseCase(accounts_port=accounts_port)


def get_get_user_profile_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> GetUserProfileUseCase:
    return GetUserProfileUseCase(accounts_port=accounts_port)


def get_lookup_user_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> LookupUserUseCase:
    return LookupUserUseCase(accounts_port=accounts_port)


def get_delete_user_use_case(
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> DeleteUserUseCase:
    return DeleteUserUseCase(accounts_port=accounts_port)


def _extract_access_token(authorization: str | None, cookie_token: str | None) -> str:
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()
    if authorization:
        if not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Invalid authorization header.")
        token = authorization.replace("Bearer ", "", 1).strip()
        if token:
            return token
    raise HTTPException(status_code=401, detail="Unauthorized request.")


def get_current_user(
    authorization: str | None = Header(default=None),
    access_token_cookie: str | None = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
    token_service: TokenPort = Depends(get_token_service),
    accounts_port: AccountsPort = Depends(get_accounts_repository),
) -> User:
    token = _extract_access_token(authorization, access_token_cookie)

    try:
        payload = token_service.decode_access_token(token=token)
    except TokenExpiredError as exc:
        raise HTTPException(status_code=401, detail="Access token expired.") from exc
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail="Invalid access token.") from exc

    user = accounts_port.get_user_by_id(user_id=payload.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid access token.")
    return user
