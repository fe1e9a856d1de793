"""Pydantic schemas for backend payloads and admin API bodies."""

from src.schemas.accounts import (
    Account,
    AccountCreateRequest,
    AccountStatusRequest,
    AccountUpdateRequest,
    InitialBalanceRequest,
)
from src.schemas.expenses import (
    ActiveExpense,
    ExpenseCreateRequest,
    ExpenseStatus,
    ExpenseType,
    MonthlyEntryRequest,
    MonthlyExpense,
    PendingRecurringExpense,
    RecurringDefinitionCreateRequest,
    RecurringExpenseDefinition,
)
from src.schemas.gas import GasReading, GasReadingUpdateRequest
from src.schemas.incomes import Income, IncomeCreateRequest, IncomeType
from src.schemas.notifications import NotificationResponse
from src.schemas.reference import ReferenceDataResponse
from src.schemas.slips import SlipGenerationRequest, SlipGenerationResult, SlipSettingsPayload
from src.schemas.units import NotificationRecipient, RecipientsSyncRequest, ResidentUnit
from src.schemas.users import AssignUnitRequest, User, UserUpdateRequest

__all__ = [
    "Account",
    "AccountCreateRequest",
    "AccountStatusRequest",
    "AccountUpdateRequest",
    "ActiveExpense",
    "AssignUnitRequest",
    "ExpenseCreateRequest",
    "ExpenseStatus",
    "ExpenseType",
    "GasReading",
    "GasReadingUpdateRequest",
    "Income",
    "IncomeCreateRequest",
    "IncomeType",
    "InitialBalanceRequest",
    "MonthlyEntryRequest",
    "MonthlyExpense",
    "NotificationRecipient",
    "NotificationResponse",
    "PendingRecurringExpense",
    "RecipientsSyncRequest",
    "RecurringDefinitionCreateRequest",
    "RecurringExpenseDefinition",
    "ReferenceDataResponse",
    "ResidentUnit",
    "SlipGenerationRequest",
    "SlipGenerationResult",
    "SlipSettingsPayload",
    "User",
    "UserUpdateRequest",
]
