from __future__ import annotations

import logging

from app.application.dto.auth import ChangePasswordInput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.domain.exceptions import InvalidCredentialsError, NotFoundError, ValidationError

from .auth_common import ensure_valid_password, utcnow


logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """Replace a user's password after checking the current one.

    The stored refresh token survives the change unless ``revoke_sessions`` is
    set, in which case the same write clears it and the user must log in again.
    """

    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        revoke_sessions: bool = False,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._revoke_sessions = revoke_sessions

    def execute(self, command: ChangePasswordInput) -> None:
        if not command.old_password or not command.new_password:
            raise ValidationError("Old and new password are required.")

        credentials = self._accounts_port.get_credentials(user_id=command.user_id)
        if credentials is None:
            raise NotFoundError("User not found.")

        if not self._password_hasher.verify(command.old_password, credentials.password_hash):
            logger.info("change_password: invalid_old_password user_id=%s", command.user_id)
            raise InvalidCredentialsError("Invalid old password.")

        ensure_valid_password(command.new_password)

        self._accounts_port.update_password_hash(
            user_id=command.user_id,
            password_hash=self._password_hasher.hash(command.new_password),
            clear_refresh_token=self._revoke_sessions,
            updated_at=utcnow(),
        )
        logger.info(
            "change_password: updated user_id=%s sessions_revoked=%s",
            command.user_id,
            self._revoke_sessions,
        )
