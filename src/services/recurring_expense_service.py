"""Service for recurring expense definitions and their monthly entries."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable

from src.api.errors import ValidationError
from src.schemas.expenses import RecurringExpenseDefinition
from src.services.backend_client import BackendClient
from src.services.expense_service import sort_by_description
from src.services.parsers import parse_amount_to_cents, parse_localized_amount_to_cents

logger = logging.getLogger(__name__)


def available_months(today: date | None = None) -> list[int]:
    """Months a new definition may cover: the current month and the rest of the year."""
    current_month = (today or date.today()).month
    return list(range(current_month, 13))


def validate_months(months_of_year: Iterable[int], today: date | None = None) -> list[int]:
    """Return the months sorted and de-duplicated.

    Raises:
        ValidationError: Empty selection, month outside 1..12, or a past month
    """
    months = sorted(set(months_of_year or []))
    if not months:
        raise ValidationError("Select at least one month.")
    if any(m < 1 or m > 12 for m in months):
        raise ValidationError("Months must be between 1 and 12.")
    allowed = set(available_months(today))
    past = [m for m in months if m not in allowed]
    if past:
        raise ValidationError(f"Months already past cannot be selected: {past}")
    return months


class RecurringExpenseService:
    """Recurring expense operations against /api/v1/recurring-expenses."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def definitions_for_year(self, year: int) -> list[RecurringExpenseDefinition]:
        """Definitions active in a year, sorted by description."""
        data = await self.client.get(
            f"/api/v1/recurring-expenses/year/{year}",
            error_message="Failed to load recurring expense definitions.",
        )
        items = data.get("expenses") if isinstance(data, dict) else None
        definitions = [RecurringExpenseDefinition.model_validate(item) for item in items or []]
        return sort_by_description(definitions)

    async def create_definition(
        self,
        type_id: str,
        account_id: str | None,
        due_day: int | None,
        months_of_year: Iterable[int],
        description: str | None = None,
        amount: Decimal | str | float | None = None,
        has_predefined_amount: bool = False,
        today: date | None = None,
    ) -> str:
        """Create a recurring expense definition.

        Without a predefined amount the definition is sent with amount 0 and
        the amount is entered each month.

        Raises:
            ValidationError: Invalid day, months or predefined amount
        """
        if not type_id:
            raise ValidationError("Expense type is required.")
        if due_day is None or not 1 <= int(due_day) <= 31:
            raise ValidationError("Due day must be between 1 and 31.")
        months = validate_months(months_of_year, today)

        amount_cents = 0
        if has_predefined_amount:
            try:
                amount_cents = parse_amount_to_cents(amount)
            except ValueError:
                amount_cents = 0
            if amount_cents <= 0:
                raise ValidationError(
                    "A valid amount is required when the amount is predefined."
                )

        definition_id = str(uuid.uuid4())
        await self.client.put(
            "/api/v1/recurring-expenses/create",
            json={
                "id": definition_id,
                "amount": amount_cents,
                "type": type_id,
                "accountId": account_id or None,
                "dueDay": int(due_day),
                "monthsOfYear": months,
                "description": (description or "").strip() or None,
                "hasPredefinedAmount": has_predefined_amount,
            },
            error_message="Failed to create the recurring expense.",
        )
        logger.info(
            "Recurring expense created: id=%s day=%s months=%s", definition_id, due_day, months
        )
        return definition_id

    async def enter_monthly(
        self,
        recurring_expense_id: str,
        account_id: str | None,
        amount_text: str,
        due_date: date,
    ) -> str:
        """Materialize a pending recurring expense for its month.

        Args:
            recurring_expense_id: Definition id
            account_id: Account the expense is paid from (required)
            amount_text: Amount as edited in the table ("1.234,56")
            due_date: Due date of the month's entry

        Raises:
            ValidationError: No account selected or amount not positive
        """
        if not account_id:
            raise ValidationError("Select an account for the expense before saving.")
        try:
            amount_cents = parse_localized_amount_to_cents(amount_text)
        except ValueError as e:
            raise ValidationError("The amount must be a number greater than zero.") from e
        if amount_cents <= 0:
            raise ValidationError("The amount must be a number greater than zero.")

        entry_id = str(uuid.uuid4())
        await self.client.put(
            "/api/v1/recurring-expenses/enter-monthly",
            json={
                "id": entry_id,
                "recurringExpenseId": recurring_expense_id,
                "accountId": account_id,
                "amount": amount_cents,
                "date": due_date.isoformat(),
            },
            error_message="Failed to save the expense.",
        )
        logger.info(
            "Recurring expense entered: definition=%s amount=%d date=%s",
            recurring_expense_id,
            amount_cents,
            due_date,
        )
        return entry_id


__all__ = ["RecurringExpenseService", "available_months", "validate_months"]
