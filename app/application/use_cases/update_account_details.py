from __future__ import annotations

from app.application.dto.auth import AuthUserOutput
from app.application.dto.users import UpdateAccountDetailsInput
from app.application.ports.accounts_port import AccountsPort
from app.domain.exceptions import ConflictError, NotFoundError, ValidationError

from .auth_common import build_auth_user_output, clean, ensure_valid_email, normalize_email, utcnow


class UpdateAccountDetailsUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: UpdateAccountDetailsInput) -> AuthUserOutput:
        full_name = clean(command.full_name)
        email = normalize_email(command.email)
        phone = clean(command.phone)
        if not full_name or not email or not phone:
            raise ValidationError("All fields are required.")
        ensure_valid_email(email)

        owner = self._accounts_port.get_user_by_email(email=email)
        if owner is not None and owner.id != command.user_id:
            raise ConflictError("Email already used.")

        user = self._accounts_port.update_account_details(
            user_id=command.user_id,
            full_name=full_name,
            email=email,
            phone=phone,
            updated_at=utcnow(),
        )
        if user is None:
            raise NotFoundError("User not found.")
        return build_auth_user_output(user)
