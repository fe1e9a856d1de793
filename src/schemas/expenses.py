"""Expense, expense type and recurring expense schemas."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import Field, computed_field, field_validator

from src.schemas.accounts import Account
from src.schemas.base import CamelModel
from src.services.parsers import parse_api_date

UNKNOWN_EXPENSE_TYPE = "Unknown type"
UNKNOWN_DISTRIBUTION = "N/A"


def _blank_if_none(value):
    return "" if value is None else value


class ExpenseType(CamelModel):
    """Expense category with its cost-splitting method."""

    id: str
    name: str
    code: str | None = None
    description: str | None = None
    distribution_method: str = UNKNOWN_DISTRIBUTION

    @classmethod
    def unknown(cls, type_id: str) -> "ExpenseType":
        """Placeholder for a type id missing from the reference data."""
        return cls(id=type_id, name=UNKNOWN_EXPENSE_TYPE, distribution_method=UNKNOWN_DISTRIBUTION)


class ActiveExpense(CamelModel):
    """Concrete expense from GET /api/v1/expenses/date-range/{year}/{month}.

    Dates arrive either as strings or wrapped in {"date": ...} objects.
    """

    id: str
    description: str = ""
    amount: int = 0
    due_date: date | None = None
    paid_at: date | None = None
    created_at: date | None = None
    resident_unit_id: str | None = None
    type: ExpenseType
    account: Account | None = None
    account_id: str | None = None

    @field_validator("due_date", "paid_at", "created_at", mode="before")
    @classmethod
    def unwrap_dates(cls, value):
        return parse_api_date(value)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value):
        return _blank_if_none(value)


class PendingRecurringExpense(CamelModel):
    """Recurring expense still to be entered for a month."""

    id: str
    account_id: str | None = None
    amount: int = 0
    type: str
    due_day: int
    months_of_year: list[int] = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    description: str = ""
    notes: str | None = None
    has_predefined_amount: bool = False

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def unwrap_dates(cls, value):
        return parse_api_date(value)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value):
        return _blank_if_none(value)


class RecurringExpenseDefinition(PendingRecurringExpense):
    """Recurring expense template as listed per year."""

    is_active: bool = True


class ExpenseStatus(str, Enum):
    """Row status in the monthly expenses table.

    ``FORECAST`` marks a recurring expense whose amount must still be entered.
    """

    FORECAST = "forecast"

    CONFIRMED = "confirmed"


class MonthlyExpense(CamelModel):
    """Row of the monthly expenses table (recurring and one-off merged)."""

    id: str
    description: str
    amount: int
    due_date: date | None = None
    paid_at: date | None = None
    resident_unit_id: str | None = None
    expense_type: ExpenseType
    has_predefined_amount: bool = True
    account_id: str | None = None
    is_recurring: bool = False

    @computed_field
    @property
    def status(self) -> ExpenseStatus:
        if not self.has_predefined_amount:
            return ExpenseStatus.FORECAST
        return ExpenseStatus.CONFIRMED


class ExpenseCreateRequest(CamelModel):
    """Body of the one-off expense form."""

    description: str = ""
    amount: Decimal | None = None  # reais
    due_date: date | None = None
    type_id: str = ""
    account_id: str | None = None
    resident_unit_id: str | None = None
    is_active: bool = True


class RecurringDefinitionCreateRequest(CamelModel):
    """Body of the recurring expense form."""

    type_id: str = ""
    account_id: str | None = None
    due_day: int | None = None
    months_of_year: list[int] = Field(default_factory=list)
    description: str | None = None
    amount: Decimal | None = None  # reais
    has_predefined_amount: bool = False


class MonthlyEntryRequest(CamelModel):
    """Amount entered for a pending recurring expense (pt-BR formatted text)."""

    account_id: str | None = None
    amount: str = ""
    due_date: date
