"""Slip settings model for per-month fees and gas price."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class SlipSettings(Base, BaseModel):
    """Fees added to every slip of a month, stored as typed ("0,00")."""

    __tablename__ = "slip_settings"

    target_month: Mapped[str] = mapped_column(String(7), nullable=False, unique=True)
    extra_fee: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    reserve_fund: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    gas_unit_price: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<SlipSettings(month={self.target_month}, gas_unit_price={self.gas_unit_price})>"


__all__ = ["SlipSettings"]
