"""Notification (toast) schemas."""

from src.schemas.base import CamelModel


class NotificationResponse(CamelModel):
    """Active notification shown by the admin front end."""

    id: int
    message: str
    type: str
    title: str
