"""Service for condominium users."""

import logging

from src.api.errors import ValidationError
from src.schemas.users import User, UserUpdateRequest
from src.services.backend_client import BackendClient

logger = logging.getLogger(__name__)


class UserService:
    """User operations against /api/v1/users."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_users(self) -> list[User]:
        data = await self.client.get("/api/v1/users", error_message="Failed to load users.")
        return [User.model_validate(item) for item in data or []]

    async def get_user(self, user_id: str) -> User | None:
        for user in await self.list_users():
            if user.id == user_id:
                return user
        return None

    async def update_user(self, user: User, changes: UserUpdateRequest | None = None) -> User:
        """Save profile changes; the backend expects the whole user object."""
        if changes is not None:
            user = user.model_copy(update=changes.model_dump(exclude_unset=True))
        await self.client.put(
            f"/api/v1/users/{user.id}",
            json=user.to_payload(),
            error_message="Failed to update the user.",
        )
        logger.info("User updated: id=%s", user.id)
        return user

    async def assign_unit(self, user_id: str, resident_unit_id: str | None) -> None:
        if not resident_unit_id:
            raise ValidationError("Please select a resident unit.")
        await self.client.put(
            f"/api/v1/users/{user_id}/resident-unit",
            json={"residentUnitId": resident_unit_id},
            error_message="Failed to link the resident unit.",
        )
        logger.info("User %s linked to unit %s", user_id, resident_unit_id)


__all__ = ["UserService"]
