"""Resident unit schemas."""

from pydantic import Field

from src.schemas.base import CamelModel


class NotificationRecipient(CamelModel):
    """Person who receives the unit's slips by email."""

    name: str
    email: str


class ResidentUnit(CamelModel):
    """Apartment/unit record."""

    id: str
    unit: str
    ideal_fraction: float | None = None
    is_active: bool = True
    notification_recipients: list[NotificationRecipient] = Field(default_factory=list)


class RecipientsSyncRequest(CamelModel):
    """Desired recipient list for a unit."""

    recipients: list[NotificationRecipient]
