from __future__ import annotations

import logging

from app.application.dto.auth import AuthTokensOutput, LoginInput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.application.ports.token_port import TokenPort
from app.domain.exceptions import InvalidCredentialsError, NotFoundError, ValidationError

from .auth_common import clean, mint_tokens, normalize_email, utcnow


logger = logging.getLogger(__name__)


class LoginUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: LoginInput) -> AuthTokensOutput:
        email = normalize_email(command.email)
        phone = clean(command.phone)
        if not (email or phone):
            raise ValidationError("Email or phone is required.")
        if not command.password:
            raise ValidationError("Password is required.")

        user = self._accounts_port.find_user_by_email_or_phone(email=email or None, phone=phone or None)
        if user is None:
            raise NotFoundError("User not found.")

        credentials = self._accounts_port.get_credentials(user_id=user.id)
        if credentials is None:
            raise NotFoundError("User not found.")

        verified, replacement_hash = self._password_hasher.verify_and_update(
            command.password,
            credentials.password_hash,
        )
        if not verified:
            logger.info("login: invalid_password user_id=%s", user.id)
            raise InvalidCredentialsError("Password incorrect.")

        now = utcnow()
        if replacement_hash:
            self._accounts_port.update_password_hash(
                user_id=user.id,
                password_hash=replacement_hash,
                clear_refresh_token=False,
                updated_at=now,
            )

        output = mint_tokens(user=user, token_port=self._token_port, now=now)
        # Overwriting the stored token invalidates any refresh token issued before.
        self._accounts_port.set_refresh_token(user_id=user.id, refresh_token=output.refresh_token)
        logger.info("login: success user_id=%s", user.id)
        return output
