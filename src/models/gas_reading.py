"""Gas reading draft model - meter readings typed before slip generation."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class GasReadingDraft(Base, BaseModel):
    """Current gas meter reading of a resident unit for a target month.

    The reading is stored as typed ("1520,5") and parsed when the
    consumption is computed.

    Attributes:
        target_month: Month the reading belongs to ("YYYY-MM")
        resident_unit_id: Backend UUID of the unit
        unit_label: Unit name at the time of the reading (e.g. "101")
        current_reading: Meter value as typed
    """

    __tablename__ = "gas_reading_drafts"

    target_month: Mapped[str] = mapped_column(String(7), nullable=False)
    resident_unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_label: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    current_reading: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    __table_args__ = (
        Index("ix_gas_reading_month_unit", "target_month", "resident_unit_id", unique=True),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GasReadingDraft(month={self.target_month}, unit={self.unit_label}, "
            f"reading={self.current_reading})>"
        )


__all__ = ["GasReadingDraft"]
