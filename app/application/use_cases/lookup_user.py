from __future__ import annotations

from app.application.dto.auth import AuthUserOutput
from app.application.dto.users import LookupUserInput
from app.application.ports.accounts_port import AccountsPort
from app.domain.exceptions import NotFoundError, ValidationError

from .auth_common import build_auth_user_output, clean, normalize_email


class LookupUserUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: LookupUserInput) -> AuthUserOutput:
        email = normalize_email(command.email)
        phone = clean(command.phone)
        if not (email or phone):
            raise ValidationError("Email or phone is required.")

        user = self._accounts_port.find_user_by_email_or_phone(email=email or None, phone=phone or None)
        if user is None:
            raise NotFoundError("User not found.")
        return build_auth_user_output(user)
