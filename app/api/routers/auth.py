from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Body, Cookie, Depends, HTTPException, Response

from app.api.deps import (
    ACCESS_COOKIE_NAME,
    REFRESH_COOKIE_NAME,
    get_change_password_use_case,
    get_current_user,
    get_login_use_case,
    get_logout_session_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
)
from app.api.schemas.auth import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    RefreshData,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)
from app.api.schemas.envelope import ApiResponse, ok
from app.application.dto.auth import (
    AuthTokensOutput,
    ChangePasswordInput,
    LoginInput,
    LogoutInput,
    RefreshSessionInput,
    RegisterUserInput,
)
from app.application.use_cases.change_password import ChangePasswordUseCase
from app.application.use_cases.login import LoginUseCase
from app.application.use_cases.logout_session import LogoutSessionUseCase
from app.application.use_cases.refresh_session import RefreshSessionUseCase
from app.application.use_cases.register_user import RegisterUserUseCase
from app.domain.entities.user import User
from app.domain.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.shared.config import Settings, get_settings


router = APIRouter()

USERS_PREFIX = "/api/v1/users"


def _max_age_seconds(expires_at: datetime) -> int:
    now = datetime.now(timezone.utc)
    return max(int((expires_at - now).total_seconds()), 0)


def _set_token_cookies(response: Response, output: AuthTokensOutput, *, secure: bool) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=output.access_token,
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=_max_age_seconds(output.access_expires_at),
        path="/",
    )
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=output.refresh_token,
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=_max_age_seconds(output.refresh_expires_at),
        path="/",
    )


def _clear_token_cookies(response: Response, *, secure: bool) -> None:
    for key in (ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME):
        response.delete_cookie(key=key, path="/", httponly=True, secure=secure, samesite="lax")


@router.post(f"{USERS_PREFIX}/register", response_model=ApiResponse[UserResponse], status_code=201)
def register_user(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        user = use_case.execute(
            RegisterUserInput(
                username=req.username,
                email=req.email,
                full_name=req.full_name,
                password=req.password,
                phone=req.phone,
                user_type=req.user_type,
                avatar=req.avatar,
                fcm_token=req.fcm_token,
            )
        )
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ok(UserResponse.model_validate(user, from_attributes=True), "User created successfully", 201)


@router.post(f"{USERS_PREFIX}/login", response_model=ApiResponse[LoginData])
def login(
    req: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    try:
        output = use_case.execute(LoginInput(email=req.email, phone=req.phone, password=req.password))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    # Tokens go out in the body too for clients that cannot keep cookies.
    _set_token_cookies(response, output, secure=settings.cookie_secure)
    return ok(
        LoginData(
            user=UserResponse.model_validate(output.user, from_attributes=True),
            access_token=output.access_token,
            refresh_token=output.refresh_token,
        ),
        "User logged in successfully",
    )


@router.post(f"{USERS_PREFIX}/logout", response_model=ApiResponse[dict])
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    use_case.execute(LogoutInput(user_id=current_user.id))
    _clear_token_cookies(response, secure=settings.cookie_secure)
    return ok({}, "User logged out successfully")


@router.post(f"{USERS_PREFIX}/refresh-token", response_model=ApiResponse[RefreshData])
def refresh_token(
    response: Response,
    req: RefreshTokenRequest | None = Body(default=None),
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    settings: Settings = Depends(get_settings),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    incoming = refresh_token_cookie or (req.refresh_token if req is not None else None)
    try:
        output = use_case.execute(RefreshSessionInput(refresh_token=incoming))
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    _set_token_cookies(response, output, secure=settings.cookie_secure)
    return ok(
        RefreshData(access_token=output.access_token, refresh_token=output.refresh_token),
        "Access token refreshed",
    )


@router.patch(f"{USERS_PREFIX}/change-password", response_model=ApiResponse[dict])
def change_password(
    req: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    try:
        use_case.execute(
            ChangePasswordInput(
                user_id=current_user.id,
                old_password=req.old_password,
                new_password=req.new_password,
            )
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return ok({}, "Password changed successfully")
