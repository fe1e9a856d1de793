"""Admin API endpoints: one endpoint per action of the administration screens."""

import logging
import time
from contextlib import contextmanager
from typing import Annotated, Any, Iterator

from fastapi import APIRouter, Depends, Path, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from src.api.errors import (
    AppError,
    BackendError,
    ConfirmationRequiredError,
    NotFoundError,
    ValidationError,
)
from src.schemas import (
    Account,
    AccountCreateRequest,
    AccountStatusRequest,
    AccountUpdateRequest,
    AssignUnitRequest,
    ExpenseCreateRequest,
    GasReading,
    GasReadingUpdateRequest,
    Income,
    IncomeCreateRequest,
    InitialBalanceRequest,
    MonthlyEntryRequest,
    MonthlyExpense,
    NotificationRecipient,
    NotificationResponse,
    RecipientsSyncRequest,
    RecurringDefinitionCreateRequest,
    RecurringExpenseDefinition,
    ReferenceDataResponse,
    ResidentUnit,
    SlipGenerationRequest,
    SlipGenerationResult,
    SlipSettingsPayload,
    User,
    UserUpdateRequest,
)
from src.services import get_db
from src.services.account_service import AccountService
from src.services.backend_client import BackendClient
from src.services.expense_service import ExpenseService
from src.services.gas_service import GasService
from src.services.income_service import IncomeService
from src.services.notification_service import NotificationCenter
from src.services.parsers import format_target_month, parse_amount_to_cents
from src.services.recurring_expense_service import RecurringExpenseService
from src.services.reference_service import ReferenceService
from src.services.slip_service import SlipService, gas_unit_price, normalize_target_month
from src.services.unit_service import UnitService
from src.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

Month = Annotated[int, Path(ge=1, le=12, description="Month of year (1-12)")]


def get_backend_client(request: Request) -> BackendClient:
    """Backend client created in the app lifespan."""
    return request.app.state.backend_client


def get_notifications(request: Request) -> NotificationCenter:
    """Notification queue created in the app lifespan."""
    return request.app.state.notifications


def _log_debug(endpoint: str, start_time: float, **kwargs: Any) -> None:
    """Log an admin request with timing at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug("admin.%s: %sduration_ms=%d", endpoint, f"{extra} " if extra else "", duration_ms)


@contextmanager
def notify_outcome(notifications: NotificationCenter, success_message: str) -> Iterator[None]:
    """Queue a success toast when the block completes, an error toast when it fails.

    A pending confirmation is not an error: the front end asks the user instead.
    """
    try:
        yield
    except ConfirmationRequiredError:
        raise
    except (AppError, BackendError) as e:
        notifications.error(e.message)
        raise
    notifications.success(success_message)


# Reference data


@router.get("/reference", response_model=ReferenceDataResponse)
async def get_reference(client: BackendClient = Depends(get_backend_client)) -> ReferenceDataResponse:
    start_time = time.time()
    data = await ReferenceService(client).load()
    _log_debug("reference", start_time, accounts=len(data.accounts))
    return ReferenceDataResponse(
        expense_types=data.expense_types,
        resident_units=data.resident_units,
        accounts=data.accounts,
    )


# Accounts


@router.get("/accounts", response_model=list[Account])
async def list_accounts(client: BackendClient = Depends(get_backend_client)) -> list[Account]:
    return await AccountService(client).list_accounts()


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
async def create_account(
    body: AccountCreateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    with notify_outcome(notifications, "Account created successfully!"):
        account_id = await AccountService(client).create_account(
            name=body.name,
            code=body.code,
            description=body.description,
            initial_balance=body.initial_balance,
            balance_date=body.balance_date,
        )
    return {"id": account_id}


@router.patch("/accounts/{account_id}")
async def update_account(
    account_id: str,
    body: AccountUpdateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    with notify_outcome(notifications, "Account updated successfully!"):
        if not body.name.strip() or not body.code.strip():
            raise ValidationError("Name and code are required.")
        await AccountService(client).update_account(
            account_id, body.name.strip(), body.code.strip(), body.description
        )
    return {"id": account_id}


@router.patch("/accounts/{account_id}/status", response_model=list[Account])
async def set_account_status(
    account_id: str,
    body: AccountStatusRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> list[Account]:
    """Enable or disable an account and return the account list."""
    service = AccountService(client)
    message = "Account enabled successfully!" if body.is_active else "Account disabled successfully!"
    with notify_outcome(notifications, message):
        await service.list_accounts()
        accounts = await service.set_account_status(account_id, body.is_active)
    return accounts


@router.put("/accounts/{account_id}/initial-balance", status_code=status.HTTP_204_NO_CONTENT)
async def set_initial_balance(
    account_id: str,
    body: InitialBalanceRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> Response:
    with notify_outcome(notifications, "Initial balance saved successfully!"):
        try:
            amount_cents = parse_amount_to_cents(body.amount)
        except ValueError as e:
            raise ValidationError("Invalid initial balance.") from e
        await AccountService(client).set_initial_balance(account_id, amount_cents, body.balance_date)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Expenses


@router.get("/expenses/{year}/{month}", response_model=list[MonthlyExpense])
async def list_monthly_expenses(
    year: int,
    month: Month,
    client: BackendClient = Depends(get_backend_client),
) -> list[MonthlyExpense]:
    start_time = time.time()
    expense_types = await ReferenceService(client).get_expense_types()
    rows = await ExpenseService(client).monthly_expenses(year, month, expense_types)
    _log_debug("expenses", start_time, year=year, month=month, count=len(rows))
    return rows


@router.post("/expenses", status_code=status.HTTP_201_CREATED)
async def create_expense(
    body: ExpenseCreateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    with notify_outcome(notifications, "Expense created successfully!"):
        expense_id = await ExpenseService(client).create_expense(
            description=body.description,
            amount=body.amount,
            due_date=body.due_date,
            type_id=body.type_id,
            account_id=body.account_id,
            resident_unit_id=body.resident_unit_id,
            is_active=body.is_active,
        )
    return {"id": expense_id}


# Recurring expenses


@router.get("/recurring-expenses/{year}", response_model=list[RecurringExpenseDefinition])
async def list_recurring_expenses(
    year: int, client: BackendClient = Depends(get_backend_client)
) -> list[RecurringExpenseDefinition]:
    return await RecurringExpenseService(client).definitions_for_year(year)


@router.post("/recurring-expenses", status_code=status.HTTP_201_CREATED)
async def create_recurring_expense(
    body: RecurringDefinitionCreateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    with notify_outcome(notifications, "Recurring expense created successfully!"):
        definition_id = await RecurringExpenseService(client).create_definition(
            type_id=body.type_id,
            account_id=body.account_id,
            due_day=body.due_day,
            months_of_year=body.months_of_year,
            description=body.description,
            amount=body.amount,
            has_predefined_amount=body.has_predefined_amount,
        )
    return {"id": definition_id}


@router.post("/recurring-expenses/{recurring_expense_id}/entries", status_code=status.HTTP_201_CREATED)
async def enter_recurring_expense(
    recurring_expense_id: str,
    body: MonthlyEntryRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    """Save the amount of a pending recurring expense for its month."""
    with notify_outcome(notifications, "Expense saved successfully!"):
        entry_id = await RecurringExpenseService(client).enter_monthly(
            recurring_expense_id, body.account_id, body.amount, body.due_date
        )
    return {"id": entry_id}


# Incomes


@router.get("/incomes", response_model=list[Income])
async def list_incomes(client: BackendClient = Depends(get_backend_client)) -> list[Income]:
    return await IncomeService(client).list_incomes()


@router.post("/incomes", status_code=status.HTTP_201_CREATED)
async def create_income(
    body: IncomeCreateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> dict:
    with notify_outcome(notifications, "Income created successfully!"):
        income_id = await IncomeService(client).create_income(
            resident_unit_id=body.resident_unit_id,
            amount=body.amount,
            income_type=body.type,
            due_date=body.due_date,
            description=body.description,
        )
    return {"id": income_id}


# Gas consumption


@router.get("/gas/{year}/{month}", response_model=list[GasReading])
async def list_gas_readings(
    year: int,
    month: Month,
    client: BackendClient = Depends(get_backend_client),
    db: Session = Depends(get_db),
) -> list[GasReading]:
    """Readings of every active unit, priced with the month's gas unit price."""
    units = await ReferenceService(client).get_active_units()

    def load() -> list[GasReading]:
        settings = SlipService(client, db).get_settings(format_target_month(year, month))
        return GasService(db).readings_for_month(
            year, month, units=units, unit_price=gas_unit_price(settings)
        )

    return await run_in_threadpool(load)


@router.put("/gas/{year}/{month}/{unit_id}", response_model=GasReading)
def save_gas_reading(
    year: int,
    unit_id: str,
    body: GasReadingUpdateRequest,
    month: Month,
    client: BackendClient = Depends(get_backend_client),
    db: Session = Depends(get_db),
) -> GasReading:
    service = GasService(db)
    service.save_reading(year, month, unit_id, body.unit or "", body.current_reading)

    settings = SlipService(client, db).get_settings(format_target_month(year, month))
    for reading in service.readings_for_month(year, month, unit_price=gas_unit_price(settings)):
        if reading.resident_unit_id == unit_id:
            return reading
    raise NotFoundError(f"No reading stored for unit {unit_id}")


# Slips


@router.get("/slips/settings/{target_month}", response_model=SlipSettingsPayload)
def get_slip_settings(
    target_month: str,
    client: BackendClient = Depends(get_backend_client),
    db: Session = Depends(get_db),
) -> SlipSettingsPayload:
    return SlipService(client, db).get_settings(target_month)


@router.put("/slips/settings/{target_month}", response_model=SlipSettingsPayload)
def save_slip_settings(
    target_month: str,
    body: SlipSettingsPayload,
    client: BackendClient = Depends(get_backend_client),
    db: Session = Depends(get_db),
) -> SlipSettingsPayload:
    return SlipService(client, db).save_settings(target_month, body)


@router.post("/slips/generation", response_model=SlipGenerationResult)
async def generate_slips(
    body: SlipGenerationRequest,
    client: BackendClient = Depends(get_backend_client),
    db: Session = Depends(get_db),
    notifications: NotificationCenter = Depends(get_notifications),
) -> SlipGenerationResult:
    """Generate the month's slips.

    Answers 409 ``confirmation_required`` when they already exist; the front
    end then asks the user and repeats the call with ``force``.
    """
    target_month = normalize_target_month(body.target_month)
    with notify_outcome(notifications, f"Slips for {target_month} generated successfully!"):
        result = await SlipService(client, db).generate(target_month, force=body.force)
    return result


# Resident units


@router.get("/units", response_model=list[ResidentUnit])
async def list_units(client: BackendClient = Depends(get_backend_client)) -> list[ResidentUnit]:
    return await UnitService(client).list_active()


async def _find_unit(service: UnitService, unit_id: str) -> ResidentUnit:
    for unit in await service.list_active():
        if unit.id == unit_id:
            return unit
    raise NotFoundError(f"Resident unit {unit_id} not found")


@router.post("/units/{unit_id}/recipients", response_model=ResidentUnit)
async def add_recipient(
    unit_id: str,
    body: NotificationRecipient,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> ResidentUnit:
    service = UnitService(client)
    with notify_outcome(notifications, "Recipient added successfully!"):
        unit = await service.add_recipient(unit_id, body.name, body.email)
    return unit or await _find_unit(service, unit_id)


@router.put("/units/{unit_id}/recipients", response_model=ResidentUnit)
async def sync_recipients(
    unit_id: str,
    body: RecipientsSyncRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> ResidentUnit:
    """Replace the unit's recipient list."""
    service = UnitService(client)
    with notify_outcome(notifications, "Recipients updated successfully!"):
        unit = await _find_unit(service, unit_id)
        await service.sync_recipients(unit, body.recipients)
    return await _find_unit(service, unit_id)


@router.delete("/units/{unit_id}/recipients/{email}", response_model=ResidentUnit)
async def remove_recipient(
    unit_id: str,
    email: str,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> ResidentUnit:
    service = UnitService(client)
    with notify_outcome(notifications, "Recipient removed successfully!"):
        unit = await service.remove_recipient(unit_id, email)
    return unit or await _find_unit(service, unit_id)


# Users


@router.get("/users", response_model=list[User])
async def list_users(client: BackendClient = Depends(get_backend_client)) -> list[User]:
    return await UserService(client).list_users()


@router.put("/users/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> User:
    service = UserService(client)
    with notify_outcome(notifications, "User updated successfully!"):
        user = await service.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        user = await service.update_user(user, body)
    return user


@router.put("/users/{user_id}/resident-unit", status_code=status.HTTP_204_NO_CONTENT)
async def assign_resident_unit(
    user_id: str,
    body: AssignUnitRequest,
    client: BackendClient = Depends(get_backend_client),
    notifications: NotificationCenter = Depends(get_notifications),
) -> Response:
    with notify_outcome(notifications, "Resident unit linked successfully!"):
        await UserService(client).assign_unit(user_id, body.resident_unit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Notifications


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    notifications: NotificationCenter = Depends(get_notifications),
) -> list[NotificationResponse]:
    return [
        NotificationResponse(id=n.id, message=n.message, type=n.type.value, title=n.title)
        for n in notifications.active()
    ]


@router.delete("/notifications/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(
    notification_id: int,
    notifications: NotificationCenter = Depends(get_notifications),
) -> Response:
    notifications.remove(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
