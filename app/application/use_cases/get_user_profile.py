from __future__ import annotations

from app.application.dto.auth import AuthUserOutput
from app.application.ports.accounts_port import AccountsPort
from app.domain.exceptions import NotFoundError

from .auth_common import build_auth_user_output


class GetUserProfileUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, *, user_id: str) -> AuthUserOutput:
        user = self._accounts_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return build_auth_user_output(user)
