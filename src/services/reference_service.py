"""Reference data shared by every screen: expense types, units and accounts."""

import logging
from dataclasses import dataclass, field

from src.schemas.accounts import Account
from src.schemas.expenses import ExpenseType
from src.schemas.units import ResidentUnit
from src.services.backend_client import BackendClient, gather

logger = logging.getLogger(__name__)

GENERAL_UNIT_LABEL = "Geral"


@dataclass
class ReferenceData:
    """Selector contents loaded when a screen opens."""

    expense_types: list[ExpenseType] = field(default_factory=list)
    resident_units: list[ResidentUnit] = field(default_factory=list)
    accounts: list[Account] = field(default_factory=list)

    def expense_type(self, type_id: str) -> ExpenseType:
        """Look up an expense type, falling back to an "unknown" placeholder."""
        return find_expense_type(self.expense_types, type_id)

    def unit_label(self, unit_id: str | None) -> str:
        """Unit name for a table cell; expenses without a unit are general."""
        return unit_label(self.resident_units, unit_id)


def find_expense_type(expense_types: list[ExpenseType], type_id: str) -> ExpenseType:
    for expense_type in expense_types:
        if expense_type.id == type_id:
            return expense_type
    return ExpenseType.unknown(type_id)


def unit_label(units: list[ResidentUnit], unit_id: str | None) -> str:
    if unit_id:
        for unit in units:
            if unit.id == unit_id:
                return unit.unit
    return GENERAL_UNIT_LABEL


def parse_accounts(data) -> list[Account]:
    """Accounts come wrapped as {"accounts": [...], "qtd": n}; a bare list is accepted too."""
    if isinstance(data, dict):
        data = data.get("accounts") or []
    return [Account.model_validate(item) for item in data or []]


class ReferenceService:
    """Loads the reference data used by the admin screens."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_expense_types(self) -> list[ExpenseType]:
        data = await self.client.get(
            "/api/v1/expense-types", error_message="Failed to load expense types."
        )
        return [ExpenseType.model_validate(item) for item in data or []]

    async def get_active_units(self) -> list[ResidentUnit]:
        data = await self.client.get(
            "/api/v1/resident-unit/actives", error_message="Failed to load resident units."
        )
        return [ResidentUnit.model_validate(item) for item in data or []]

    async def get_accounts(self) -> list[Account]:
        data = await self.client.get("/api/v1/accounts", error_message="Failed to load accounts.")
        return parse_accounts(data)

    async def load(self) -> ReferenceData:
        """Fetch expense types, active units and accounts in parallel."""
        expense_types, units, accounts = await gather(
            self.get_expense_types(),
            self.get_active_units(),
            self.get_accounts(),
        )
        logger.debug(
            "reference.load: expense_types=%d units=%d accounts=%d",
            len(expense_types),
            len(units),
            len(accounts),
        )
        return ReferenceData(expense_types=expense_types, resident_units=units, accounts=accounts)


__all__ = ["ReferenceData", "ReferenceService", "find_expense_type", "parse_accounts", "unit_label"]
