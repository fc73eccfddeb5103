"""
Shared request/response models.

JSON uses camelCase (isActive, totalBudget ...); Python attributes stay
snake_case. Models accept both spellings on input.
"""
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from app.utils.dates import as_utc


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UserResponse(CamelModel):
    """Public user fields (never the hash or the refresh token)"""
    id: int
    name: str
    email: str
    role: str
    is_active: bool
    activated_at: UtcDatetime | None = None
    expires_at: UtcDatetime | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


class SettingsResponse(CamelModel):
    currency: str
    country: str
    date_format: str
    theme: str


def public_user(user) -> dict:
    return UserResponse.model_validate(user).to_json()
