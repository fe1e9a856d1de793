"""Tests for RecurringExpenseService."""

from datetime import date

import pytest

from src.api.errors import ValidationError
from src.services.recurring_expense_service import (
    RecurringExpenseService,
    available_months,
    validate_months,
)

TODAY = date(2025, 9, 15)


class TestMonths:
    def test_available_months_from_current_month(self):
        assert available_months(TODAY) == [9, 10, 11, 12]

    def test_validate_sorts_and_deduplicates(self):
        assert validate_months([12, 9, 12], TODAY) == [9, 12]

    def test_empty_selection(self):
        with pytest.raises(ValidationError, match="at least one month"):
            validate_months([], TODAY)

    def test_out_of_range(self):
        with pytest.raises(ValidationError, match="between 1 and 12"):
            validate_months([13], TODAY)

    def test_past_months(self):
        with pytest.raises(ValidationError, match=r"\[3, 8\]"):
            validate_months([3, 8, 9], TODAY)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_definitions_for_year_sorted(backend, backend_client):
    backend.on(
        "GET",
        "/api/v1/recurring-expenses/year/2025",
        json_body={
            "expenses": [
                {"id": "d1", "type": "t1", "dueDay": 5, "description": "Zeladoria", "isActive": True},
                {"id": "d2", "type": "t2", "dueDay": 10, "description": "portaria", "isActive": False},
            ]
        },
    )

    definitions = await RecurringExpenseService(backend_client).definitions_for_year(2025)

    assert [d.id for d in definitions] == ["d2", "d1"]
    assert definitions[0].is_active is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_definitions_for_year_without_expenses_key(backend, backend_client):
    backend.on("GET", "/api/v1/recurring-expenses/year/2025", json_body={})

    assert await RecurringExpenseService(backend_client).definitions_for_year(2025) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_definition_with_predefined_amount(backend, backend_client):
    backend.on("PUT", "/api/v1/recurring-expenses/create", status_code=201)

    definition_id = await RecurringExpenseService(backend_client).create_definition(
        type_id="t1",
        account_id="a1",
        due_day=10,
        months_of_year=[12, 10],
        description=" Limpeza ",
        amount="1200.00",
        has_predefined_amount=True,
        today=TODAY,
    )

    assert backend.body("PUT", "/api/v1/recurring-expenses/create") == {
        "id": definition_id,
        "amount": 120000,
        "type": "t1",
        "accountId": "a1",
        "dueDay": 10,
        "monthsOfYear": [10, 12],
        "description": "Limpeza",
        "hasPredefinedAmount": True,
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_definition_without_predefined_amount_sends_zero(backend, backend_client):
    backend.on("PUT", "/api/v1/recurring-expenses/create", status_code=201)

    await RecurringExpenseService(backend_client).create_definition(
        type_id="t1",
        account_id=None,
        due_day=1,
        months_of_year=[9],
        amount="999",
        today=TODAY,
    )

    body = backend.body("PUT", "/api/v1/recurring-expenses/create")
    assert body["amount"] == 0
    assert body["description"] is None
    assert body["accountId"] is None


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"due_day": 0}, "Due day must be between 1 and 31."),
        ({"due_day": None}, "Due day must be between 1 and 31."),
        ({"months_of_year": []}, "Select at least one month."),
        ({"has_predefined_amount": True, "amount": None}, "A valid amount is required"),
        ({"has_predefined_amount": True, "amount": "0"}, "A valid amount is required"),
        ({"type_id": ""}, "Expense type is required."),
    ],
)
async def test_create_definition_validation(backend, backend_client, overrides, message):
    fields = {
        "type_id": "t1",
        "account_id": "a1",
        "due_day": 10,
        "months_of_year": [10],
        "today": TODAY,
    }
    fields.update(overrides)

    with pytest.raises(ValidationError, match=message):
        await RecurringExpenseService(backend_client).create_definition(**fields)

    assert backend.requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_enter_monthly(backend, backend_client):
    backend.on("PUT", "/api/v1/recurring-expenses/enter-monthly", status_code=201)

    entry_id = await RecurringExpenseService(backend_client).enter_monthly(
        "d1", "a1", "1.234,56", date(2025, 9, 10)
    )

    assert backend.body("PUT", "/api/v1/recurring-expenses/enter-monthly") == {
        "id": entry_id,
        "recurringExpenseId": "d1",
        "accountId": "a1",
        "amount": 123456,
        "date": "2025-09-10",
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_enter_monthly_requires_account(backend, backend_client):
    with pytest.raises(ValidationError, match="Select an account"):
        await RecurringExpenseService(backend_client).enter_monthly("d1", None, "10,00", date(2025, 9, 10))

    assert backend.requests == []


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("amount_text", ["", "0,00", "abc", "-10,00"])
async def test_enter_monthly_requires_positive_amount(backend, backend_client, amount_text):
    with pytest.raises(ValidationError, match="greater than zero"):
        await RecurringExpenseService(backend_client).enter_monthly("d1", "a1", amount_text, date(2025, 9, 10))
