from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UpdateAccountDetailsInput:
    user_id: str
    full_name: str
    email: str
    phone: str


@dataclass(frozen=True)
class LookupUserInput:
    email: str | None
    phone: str | None
