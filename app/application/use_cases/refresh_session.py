from __future__ import annotations

import logging

from app.application.dto.auth import AuthTokensOutput, RefreshSessionInput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.token_port import TokenPort
from app.domain.exceptions import (
    RefreshTokenReuseError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
)

from .auth_common import mint_tokens, utcnow


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    def __init__(self, *, accounts_port: AccountsPort, token_port: TokenPort):
        self._accounts_port = accounts_port
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AuthTokensOutput:
        token = (command.refresh_token or "").strip()
        if not token:
            raise UnauthorizedError("Unauthorized request.")

        try:
            claims = self._token_port.verify_refresh_token(token=token)
        except TokenExpiredError as exc:
            raise TokenExpiredError("Refresh token expired, please log in again.") from exc
        except TokenInvalidError:
            logger.warning("refresh_session: invalid_token")
            raise

        user = self._accounts_port.get_user_by_id(user_id=claims.user_id)
        if user is None:
            raise TokenInvalidError("Invalid refresh token.")

        output = mint_tokens(user=user, token_port=self._token_port, now=utcnow())
        # Match and rotation are one conditional write; a stale or replayed token updates nothing.
        rotated = self._accounts_port.rotate_refresh_token(
            user_id=user.id,
            expected=token,
            replacement=output.refresh_token,
        )
        if not rotated:
            logger.warning("refresh_session: token_reuse user_id=%s", user.id)
            raise RefreshTokenReuseError("Refresh token is expired or already used.")

        logger.info("refresh_session: rotated user_id=%s", user.id)
        return output
