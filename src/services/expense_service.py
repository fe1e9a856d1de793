"""Service for the monthly expenses table and one-off expense entry."""

import calendar
import logging
import uuid
from datetime import date
from decimal import Decimal

from src.api.errors import ValidationError
from src.schemas.expenses import (
    ActiveExpense,
    ExpenseType,
    MonthlyExpense,
    PendingRecurringExpense,
)
from src.services.backend_client import BackendClient, gather_settled
from src.services.parsers import parse_amount_to_cents
from src.services.reference_service import find_expense_type

logger = logging.getLogger(__name__)


def sort_by_description(rows: list) -> list:
    """Alphabetical order, case-insensitive, as shown in the tables."""
    return sorted(rows, key=lambda row: (row.description or "").casefold())


def pending_to_row(
    pending: PendingRecurringExpense, year: int, month: int, expense_types: list[ExpenseType]
) -> MonthlyExpense:
    """Turn a pending recurring expense into a table row due on its day of the month.

    A day past the end of a short month falls on its last day.
    """
    due_day = max(1, min(pending.due_day, calendar.monthrange(year, month)[1]))
    return MonthlyExpense(
        id=pending.id,
        description=pending.description,
        amount=pending.amount,
        due_date=date(year, month, due_day),
        paid_at=None,
        resident_unit_id=None,
        expense_type=find_expense_type(expense_types, pending.type),
        has_predefined_amount=pending.has_predefined_amount,
        account_id=pending.account_id,
        is_recurring=True,
    )


def active_to_row(expense: ActiveExpense) -> MonthlyExpense:
    """Turn a registered expense into a confirmed table row."""
    return MonthlyExpense(
        id=expense.id,
        description=expense.description,
        amount=expense.amount,
        due_date=expense.due_date,
        paid_at=expense.paid_at,
        resident_unit_id=expense.resident_unit_id,
        expense_type=expense.type,
        has_predefined_amount=True,
        account_id=expense.account.id if expense.account else expense.account_id,
        is_recurring=False,
    )


class ExpenseService:
    """Expense operations against /api/v1/expenses and pending recurring expenses."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def pending_recurring(self, year: int, month: int) -> list[PendingRecurringExpense]:
        data = await self.client.get(
            f"/api/v1/recurring-expenses/pending-monthly/{month}/{year}",
            error_message="Failed to load pending recurring expenses.",
        )
        return [PendingRecurringExpense.model_validate(item) for item in data or []]

    async def active_expenses(self, year: int, month: int) -> list[ActiveExpense]:
        data = await self.client.get(
            f"/api/v1/expenses/date-range/{year}/{month}",
            error_message="Failed to load expenses.",
        )
        return [ActiveExpense.model_validate(item) for item in data or []]

    async def monthly_expenses(
        self, year: int, month: int, expense_types: list[ExpenseType]
    ) -> list[MonthlyExpense]:
        """Merge pending recurring and registered expenses of a month.

        Both lists are fetched in parallel; if one of them fails the table
        shows the other one alone.
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}")
        self.client.ensure_token()

        pending, active = await gather_settled(
            [self.pending_recurring(year, month), self.active_expenses(year, month)],
            default=list,
        )

        rows = [pending_to_row(item, year, month, expense_types) for item in pending]
        rows.extend(active_to_row(item) for item in active)

        logger.debug(
            "expenses.monthly: year=%d month=%d pending=%d active=%d",
            year,
            month,
            len(pending),
            len(active),
        )
        return sort_by_description(rows)

    async def create_expense(
        self,
        description: str,
        amount: Decimal | str | float | None,
        due_date: date | None,
        type_id: str,
        account_id: str | None,
        resident_unit_id: str | None = None,
        is_active: bool = True,
    ) -> str:
        """Register a one-off expense.

        Returns:
            Id of the new expense

        Raises:
            ValidationError: Missing fields or non-positive amount
        """
        if not description or not description.strip():
            raise ValidationError("Description is required.")
        if not type_id:
            raise ValidationError("Expense type is required.")
        if due_date is None:
            raise ValidationError("Please select the expense date.")
        try:
            amount_cents = parse_amount_to_cents(amount)
        except ValueError as e:
            raise ValidationError("Invalid amount.") from e
        if amount_cents <= 0:
            raise ValidationError("Amount must be greater than zero.")

        expense_id = str(uuid.uuid4())
        await self.client.post(
            "/api/v1/expenses",
            json={
                "id": expense_id,
                "description": description.strip(),
                "amount": amount_cents,
                "dueDate": due_date.isoformat(),
                "type": type_id,
                "accountId": account_id or None,
                "isActive": is_active,
                "residentUnitId": resident_unit_id or None,
            },
            error_message="Failed to create the expense.",
        )
        logger.info("Expense created: id=%s amount=%d due=%s", expense_id, amount_cents, due_date)
        return expense_id


__all__ = ["ExpenseService", "active_to_row", "pending_to_row", "sort_by_description"]
