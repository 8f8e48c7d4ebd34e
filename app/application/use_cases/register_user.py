from __future__ import annotations

import logging
from uuid import uuid4

from app.application.dto.auth import AuthUserOutput, RegisterUserInput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.domain.entities.user import DEFAULT_USER_TYPE, USER_TYPES
from app.domain.exceptions import ConflictError, ValidationError

from .auth_common import (
    build_auth_user_output,
    clean,
    ensure_valid_email,
    ensure_valid_password,
    normalize_email,
    normalize_username,
    utcnow,
)


logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher

    def execute(self, command: RegisterUserInput) -> AuthUserOutput:
        username = normalize_username(command.username)
        email = normalize_email(command.email)
        full_name = clean(command.full_name)
        user_type = clean(command.user_type) or DEFAULT_USER_TYPE

        if not username or not email or not full_name or not command.password:
            raise ValidationError("All fields are required.")
        ensure_valid_email(email)
        ensure_valid_password(command.password)
        if user_type not in USER_TYPES:
            raise ValidationError(f"user_type must be one of: {', '.join(USER_TYPES)}.")

        if (
            self._accounts_port.get_user_by_email(email=email) is not None
            or self._accounts_port.get_user_by_username(username=username) is not None
        ):
            logger.info("register_user: conflict username=%s email=%s", username, email)
            raise ConflictError("Email or username already used.")

        password_hash = self._password_hasher.hash(command.password)
        user = self._accounts_port.create_user(
            user_id=str(uuid4()),
            username=username,
            email=email,
            full_name=full_name,
            phone=clean(command.phone),
            avatar=clean(command.avatar),
            user_type=user_type,
            fcm_token=clean(command.fcm_token),
            password_hash=password_hash,
            created_at=utcnow(),
        )
        logger.info("register_user: created user_id=%s", user.id)
        return build_auth_user_output(user)
