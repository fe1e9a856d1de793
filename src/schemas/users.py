"""User schemas."""

from pydantic import Field

from src.schemas.base import CamelModel
from src.schemas.units import ResidentUnit


class User(CamelModel):
    """User record as returned by GET /api/v1/users."""

    id: str
    email: str
    name: str
    last_name: str | None = None
    gender: str | None = None
    phone_number: str | None = None
    roles: list[str] = Field(default_factory=list)
    is_active: bool = True
    resident_unit: ResidentUnit | None = None


class UserUpdateRequest(CamelModel):
    """Editable profile fields."""

    name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    phone_number: str | None = None


class AssignUnitRequest(CamelModel):
    """Link a user to a resident unit."""

    resident_unit_id: str | None = None
