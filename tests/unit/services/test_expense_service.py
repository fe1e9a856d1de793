"""Tests for ExpenseService and the monthly expenses table."""

from datetime import date

import pytest

from src.api.errors import MissingTokenError, ValidationError
from src.schemas import ExpenseStatus, ExpenseType
from src.services.backend_client import BackendClient
from src.services.config import TokenStore
from src.services.expense_service import ExpenseService

PENDING_PATH = "/api/v1/recurring-expenses/pending-monthly/2/2025"
ACTIVE_PATH = "/api/v1/expenses/date-range/2025/2"

EXPENSE_TYPES = [
    ExpenseType(id="t1", name="Gás", distribution_method="consumption"),
    ExpenseType(id="t2", name="Manutenção", distribution_method="ideal_fraction"),
]

PENDING = [
    {
        "id": "p1",
        "accountId": "a1",
        "amount": 0,
        "type": "t1",
        "dueDay": 10,
        "monthsOfYear": [2],
        "description": "gás central",
        "hasPredefinedAmount": False,
    },
    {
        "id": "p2",
        "amount": 30000,
        "type": "t-missing",
        "dueDay": 30,
        "monthsOfYear": [2],
        "description": "Jardinagem",
        "hasPredefinedAmount": True,
    },
]

ACTIVE = [
    {
        "id": "e1",
        "description": "Elevador",
        "amount": 45000,
        "dueDate": {"date": "2025-02-05 00:00:00.000000", "timezone": "UTC"},
        "paidAt": "2025-02-06",
        "type": {"id": "t2", "name": "Manutenção", "distributionMethod": "ideal_fraction"},
        "account": {"id": "a2", "name": "Reserva"},
    }
]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_expenses_merges_and_sorts(backend, backend_client):
    backend.on("GET", PENDING_PATH, json_body=PENDING)
    backend.on("GET", ACTIVE_PATH, json_body=ACTIVE)

    rows = await ExpenseService(backend_client).monthly_expenses(2025, 2, EXPENSE_TYPES)

    assert [r.id for r in rows] == ["e1", "p1", "p2"]

    elevator, gas, garden = rows
    assert elevator.is_recurring is False
    assert elevator.status is ExpenseStatus.CONFIRMED
    assert elevator.account_id == "a2"
    assert elevator.due_date == date(2025, 2, 5)

    assert gas.is_recurring is True
    assert gas.status is ExpenseStatus.FORECAST
    assert gas.due_date == date(2025, 2, 10)
    assert gas.expense_type.name == "Gás"

    assert garden.is_recurring is True
    assert garden.due_date == date(2025, 2, 28)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_due_day_past_month_end_falls_on_last_day(backend, backend_client):
    backend.on(
        "GET",
        "/api/v1/recurring-expenses/pending-monthly/4/2025",
        json_body=[{"id": "p31", "type": "t2", "dueDay": 31, "monthsOfYear": [4], "description": "Limpeza"}],
    )
    backend.on("GET", "/api/v1/expenses/date-range/2025/4", json_body=[])

    rows = await ExpenseService(backend_client).monthly_expenses(2025, 4, EXPENSE_TYPES)

    assert [r.id for r in rows] == ["p31"]
    assert rows[0].due_date == date(2025, 4, 30)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_expenses_unknown_type(backend, backend_client):
    backend.on("GET", "/api/v1/recurring-expenses/pending-monthly/3/2025", json_body=PENDING[1:])
    backend.on("GET", "/api/v1/expenses/date-range/2025/3", json_body=[])

    rows = await ExpenseService(backend_client).monthly_expenses(2025, 3, EXPENSE_TYPES)

    assert rows[0].expense_type.name == "Unknown type"
    assert rows[0].expense_type.distribution_method == "N/A"
    assert rows[0].due_date == date(2025, 3, 30)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_expenses_shows_remaining_list_when_one_fails(backend, backend_client):
    backend.on("GET", PENDING_PATH, status_code=500)
    backend.on("GET", ACTIVE_PATH, json_body=ACTIVE)

    rows = await ExpenseService(backend_client).monthly_expenses(2025, 2, EXPENSE_TYPES)

    assert [r.id for r in rows] == ["e1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_expenses_requires_token(backend, tmp_path):
    client = BackendClient(
        "http://backend.test",
        TokenStore(token_file=tmp_path / "missing"),
        transport=backend.transport(),
    )

    with pytest.raises(MissingTokenError):
        await ExpenseService(client).monthly_expenses(2025, 2, EXPENSE_TYPES)

    assert backend.requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_expense(backend, backend_client):
    backend.on("POST", "/api/v1/expenses", status_code=201)

    expense_id = await ExpenseService(backend_client).create_expense(
        description=" Conserto do portão ",
        amount="350.75",
        due_date=date(2025, 2, 20),
        type_id="t2",
        account_id="a1",
    )

    body = backend.body("POST", "/api/v1/expenses")
    assert body == {
        "id": expense_id,
        "description": "Conserto do portão",
        "amount": 35075,
        "dueDate": "2025-02-20",
        "type": "t2",
        "accountId": "a1",
        "isActive": True,
        "residentUnitId": None,
    }


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"description": "  "}, "Description is required."),
        ({"type_id": ""}, "Expense type is required."),
        ({"due_date": None}, "Please select the expense date."),
        ({"amount": "0"}, "Amount must be greater than zero."),
        ({"amount": "-5"}, "Amount must be greater than zero."),
        ({"amount": "abc"}, "Invalid amount."),
    ],
)
async def test_create_expense_validation(backend, backend_client, overrides, message):
    fields = {
        "description": "Portão",
        "amount": "10",
        "due_date": date(2025, 2, 20),
        "type_id": "t2",
        "account_id": None,
    }
    fields.update(overrides)

    with pytest.raises(ValidationError) as exc_info:
        await ExpenseService(backend_client).create_expense(**fields)

    assert exc_info.value.message == message
    assert backend.requests == []
