"""Service for resident units and their slip notification recipients."""

import logging

from src.api.errors import ValidationError
from src.schemas.units import NotificationRecipient, ResidentUnit
from src.services.backend_client import BackendClient, gather

logger = logging.getLogger(__name__)


class UnitService:
    """Resident unit operations against /api/v1/resident-unit."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_active(self) -> list[ResidentUnit]:
        data = await self.client.get(
            "/api/v1/resident-unit/actives", error_message="Failed to load resident units."
        )
        return [ResidentUnit.model_validate(item) for item in data or []]

    async def add_recipient(self, unit_id: str, name: str, email: str) -> ResidentUnit | None:
        """Add a recipient; returns the updated unit when the backend sends it."""
        if not name or not name.strip() or not email or not email.strip():
            raise ValidationError("Recipient name and email are required.")
        data = await self.client.patch(
            f"/api/v1/resident-unit/{unit_id}/recipients",
            json={"name": name.strip(), "email": email.strip()},
            error_message="Failed to add the recipient.",
        )
        logger.info("Recipient added: unit=%s email=%s", unit_id, email)
        return ResidentUnit.model_validate(data) if data else None

    async def remove_recipient(self, unit_id: str, email: str) -> ResidentUnit | None:
        data = await self.client.delete(
            f"/api/v1/resident-unit/{unit_id}/recipients",
            json={"email": email},
            error_message="Failed to remove the recipient.",
        )
        logger.info("Recipient removed: unit=%s email=%s", unit_id, email)
        return ResidentUnit.model_validate(data) if data else None

    async def sync_recipients(
        self, unit: ResidentUnit, recipients: list[NotificationRecipient]
    ) -> None:
        """Make the unit's recipient list match ``recipients`` (matched by email).

        New recipients are added one by one, then missing ones are removed in
        parallel.
        """
        current = {r.email for r in unit.notification_recipients}
        wanted = {r.email for r in recipients}

        for recipient in recipients:
            if recipient.email not in current:
                await self.add_recipient(unit.id, recipient.name, recipient.email)

        removals = [
            self.remove_recipient(unit.id, r.email)
            for r in unit.notification_recipients
            if r.email not in wanted
        ]
        if removals:
            await gather(*removals)


__all__ = ["UnitService"]
