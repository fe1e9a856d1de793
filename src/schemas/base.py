"""Shared pydantic base for backend payloads (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads and writes camelCase keys but exposes snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
    )

    def to_payload(self, **kwargs) -> dict:
        """Serialize for the backend: camelCase keys, JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)
