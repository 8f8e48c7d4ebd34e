from __future__ import annotations

import logging

from app.application.dto.auth import LogoutInput
from app.application.ports.accounts_port import AccountsPort


logger = logging.getLogger(__name__)


class LogoutSessionUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, command: LogoutInput) -> None:
        self._accounts_port.clear_refresh_token(user_id=command.user_id)
        logger.info("logout: cleared user_id=%s", command.user_id)
