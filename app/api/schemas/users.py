from __future__ import annotations

from pydantic import Field

from app.api.schemas.envelope import CamelModel


class UpdateAccountRequest(CamelModel):
    full_name: str = Field(..., max_length=120)
    email: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=32)


class LookupUserRequest(CamelModel):
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
