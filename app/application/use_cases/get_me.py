from __future__ import annotations

from app.application.dto.auth import AuthUserOutput
from app.domain.entities.user import User

from .auth_common import build_auth_user_output


class GetMeUseCase:
    def execute(self, *, user: User) -> AuthUserOutput:
        return build_auth_user_output(user)
