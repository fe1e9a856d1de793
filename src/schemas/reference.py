"""Reference data bundle loaded by every screen."""

from pydantic import Field

from src.schemas.accounts import Account
from src.schemas.base import CamelModel
from src.schemas.expenses import ExpenseType
from src.schemas.units import ResidentUnit


class ReferenceDataResponse(CamelModel):
    """Expense types, active units and accounts for selectors."""

    expense_types: list[ExpenseType] = Field(default_factory=list)
    resident_units: list[ResidentUnit] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)
