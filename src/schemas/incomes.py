"""Income schemas."""

from datetime import date
from decimal import Decimal

from pydantic import field_validator

from src.schemas.base import CamelModel
from src.services.parsers import parse_api_date


class IncomeType(CamelModel):
    """Income category."""

    id: str
    name: str
    code: str | None = None
    description: str | None = None


class Income(CamelModel):
    """Income entry as returned by GET /api/v1/incomes."""

    id: str = ""
    resident_unit_id: str | None = None
    amount: int = 0
    type: IncomeType | str
    due_date: date | None = None
    description: str = ""

    @field_validator("due_date", mode="before")
    @classmethod
    def unwrap_dates(cls, value):
        return parse_api_date(value)

    @property
    def type_name(self) -> str:
        return self.type.name if isinstance(self.type, IncomeType) else self.type


class IncomeCreateRequest(CamelModel):
    """Body of the "new income" form; every field is required."""

    resident_unit_id: str | None = None
    amount: Decimal | None = None  # reais
    type: str | None = None
    due_date: date | None = None
    description: str | None = None
