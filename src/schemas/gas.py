"""Gas consumption schemas."""

from decimal import Decimal

from src.schemas.base import CamelModel


class GasReading(CamelModel):
    """Meter reading of one unit for a month, with its computed charge."""

    resident_unit_id: str
    unit: str
    previous_reading: Decimal = Decimal(0)
    current_reading: str = ""
    consumption: Decimal = Decimal(0)
    value: Decimal = Decimal(0)


class GasReadingUpdateRequest(CamelModel):
    """Current reading typed for a unit."""

    current_reading: str
    unit: str | None = None
