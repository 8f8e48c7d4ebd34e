from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import (
    get_current_user,
    get_delete_user_use_case,
    get_get_me_use_case,
    get_get_user_profile_use_case,
    get_lookup_user_use_case,
    get_update_account_details_use_case,
)
from app.api.routers.auth import USERS_PREFIX
from app.api.schemas.auth import UserResponse
from app.api.schemas.envelope import ApiResponse, ok
from app.api.schemas.users import LookupUserRequest, UpdateAccountRequest
from app.application.dto.users import LookupUserInput, UpdateAccountDetailsInput
from app.application.use_cases.delete_user import DeleteUserUseCase
from app.application.use_cases.get_me import GetMeUseCase
from app.application.use_cases.get_user_profile import GetUserProfileUseCase
from app.application.use_cases.lookup_user import LookupUserUseCase
from app.application.use_cases.update_account_details import UpdateAccountDetailsUseCase
from app.domain.entities.user import User
from app.domain.exceptions import ConflictError, NotFoundError, ValidationError


router = APIRouter()


def _user_response(output) -> UserResponse:
    return UserResponse.model_validate(output, from_attributes=True)


@router.get(f"{USERS_PREFIX}/me", response_model=ApiResponse[UserResponse])
def get_me(
    current_user: User = Depends(get_current_user),
    use_case: GetMeUseCase = Depends(get_get_me_use_case),
):
    output = use_case.execute(user=current_user)
    return ok(_user_response(output), "User fetched successfully")


@router.patch(f"{USERS_PREFIX}/update-account", response_model=ApiResponse[UserResponse])
def update_account(
    req: UpdateAccountRequest,
    current_user: User = Depends(get_current_user),
    use_case: UpdateAccountDetailsUseCase = Depends(get_update_account_details_use_case),
):
    try:
        output = use_case.execute(
            UpdateAccountDetailsInput(
                user_id=current_user.id,
                full_name=req.full_name,
                email=req.email,
                phone=req.phone,
            )
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ok(_user_response(output), "Account details updated successfully")


@router.get(f"{USERS_PREFIX}/profile/{{user_id}}", response_model=ApiResponse[UserResponse])
def get_user_profile(
    user_id: str,
    _current_user: User = Depends(get_current_user),
    use_case: GetUserProfileUseCase = Depends(get_get_user_profile_use_case),
):
    try:
        output = use_case.execute(user_id=user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ok(_user_response(output), "User fetched successfully")


@router.post(f"{USERS_PREFIX}/lookup", response_model=ApiResponse[UserResponse])
def lookup_user(
    req: LookupUserRequest,
    _current_user: User = Depends(get_current_user),
    use_case: LookupUserUseCase = Depends(get_lookup_user_use_case),
):
    try:
        output = use_case.execute(LookupUserInput(email=req.email, phone=req.phone))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ok(_user_response(output), "User fetched successfully")


@router.delete(f"{USERS_PREFIX}/profile/{{user_id}}", response_model=ApiResponse[dict])
def delete_user(
    user_id: str,
    _current_user: User = Depends(get_current_user),
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    try:
        use_case.execute(user_id=user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ok({}, "User deleted successfully")
