from __future__ import annotations

import logging

from app.application.ports.accounts_port import AccountsPort
from app.domain.exceptions import NotFoundError


logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, *, user_id: str) -> None:
        if not self._accounts_port.delete_user(user_id=user_id):
            raise NotFoundError("User not found.")
        logger.info("delete_user: deleted user_id=%s", user_id)
