"""Account schemas."""

from datetime import date
from decimal import Decimal

from pydantic import Field

from src.schemas.base import CamelModel


class Account(CamelModel):
    """Financial account as returned by GET /api/v1/accounts."""

    id: str
    name: str
    code: str | None = None
    description: str | None = None
    is_active: bool = True
    balance: int = 0  # cents


class AccountCreateRequest(CamelModel):
    """Body of the "new account" form."""

    name: str
    code: str
    description: str | None = None
    initial_balance: Decimal = Decimal(0)  # reais
    balance_date: date | None = None


class AccountUpdateRequest(CamelModel):
    """Body of the "edit account" form."""

    name: str
    code: str
    description: str | None = None


class AccountStatusRequest(CamelModel):
    """Enable/disable switch."""

    is_active: bool


class InitialBalanceRequest(CamelModel):
    """Body of the "set initial balance" form."""

    amount: Decimal = Field(description="Amount in reais")
    balance_date: date = Field(alias="date")
