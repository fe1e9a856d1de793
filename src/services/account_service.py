"""Service for financial accounts: listing, creation, edits and status switches."""

import logging
import uuid
from datetime import date
from decimal import Decimal

from src.api.errors import BackendError, ValidationError
from src.schemas.accounts import Account
from src.services.backend_client import BackendClient
from src.services.parsers import parse_amount_to_cents
from src.services.reference_service import parse_accounts

logger = logging.getLogger(__name__)


class AccountService:
    """Account operations against /api/v1/accounts.

    Keeps the last fetched list in ``accounts`` so status switches can be
    applied locally without a reload.
    """

    def __init__(self, client: BackendClient):
        self.client = client
        self.accounts: list[Account] = []

    async def list_accounts(self) -> list[Account]:
        data = await self.client.get("/api/v1/accounts", error_message="Failed to load accounts.")
        self.accounts = parse_accounts(data)
        return self.accounts

    async def create_account(
        self,
        name: str,
        code: str,
        description: str | None = None,
        initial_balance: Decimal | str | int = 0,
        balance_date: date | None = None,
    ) -> str:
        """Create an account, then set its initial balance and description.

        Steps after the creation call only run when needed: a non-zero initial
        balance, and a non-blank description. A failure in a later step means
        the account exists already, which the error message says.

        Returns:
            Id of the new account

        Raises:
            ValidationError: Missing name/code or invalid balance
            BackendError: Any backend call failed
        """
        name = (name or "").strip()
        code = (code or "").strip()
        if not name or not code:
            raise ValidationError("Name and code are required.")
        try:
            balance_cents = parse_amount_to_cents(initial_balance)
        except ValueError as e:
            raise ValidationError("Invalid initial balance.") from e

        account_id = str(uuid.uuid4())
        response = await self.client.put(
            "/api/v1/accounts/create",
            json={"id": account_id, "name": name, "code": code},
            error_message="Failed to create the account.",
        )
        if isinstance(response, dict) and response.get("id"):
            account_id = str(response["id"])
        logger.info("Account created: id=%s code=%s", account_id, code)

        if balance_cents != 0:
            try:
                await self.set_initial_balance(account_id, balance_cents, balance_date or date.today())
            except BackendError as e:
                raise BackendError(
                    f"Account created, but failed to set the initial balance: {e.message}",
                    status_code=e.status_code,
                    payload=e.payload,
                ) from e

        if description and description.strip():
            try:
                await self.update_account(account_id, name, code, description)
            except BackendError as e:
                raise BackendError(
                    f"Account created, but failed to update the description: {e.message}",
                    status_code=e.status_code,
                    payload=e.payload,
                ) from e

        return account_id

    async def update_account(
        self, account_id: str, name: str, code: str, description: str | None
    ) -> None:
        await self.client.patch(
            f"/api/v1/accounts/{account_id}",
            json={"name": name, "code": code, "description": description},
            error_message="Failed to update the account.",
        )
        for account in self.accounts:
            if account.id == account_id:
                account.name, account.code, account.description = name, code, description

    async def set_account_status(self, account_id: str, is_active: bool) -> list[Account]:
        """Enable or disable an account.

        On failure the list is re-fetched so it matches the server, then the
        error is raised.
        """
        action = "enable" if is_active else "disable"
        try:
            await self.client.patch(
                f"/api/v1/accounts/{action}/{account_id}",
                error_message="Failed to update account status.",
            )
        except BackendError:
            logger.warning("Account %s failed for %s, reloading accounts", action, account_id)
            await self.list_accounts()
            raise

        for account in self.accounts:
            if account.id == account_id:
                account.is_active = is_active
        return self.accounts

    async def set_initial_balance(self, account_id: str, amount_cents: int, on: date) -> None:
        await self.client.put(
            f"/api/v1/accounts/{account_id}/initial-balance",
            json={"amount": amount_cents, "date": on.isoformat()},
            error_message="Failed to set the initial balance.",
        )


__all__ = ["AccountService"]
