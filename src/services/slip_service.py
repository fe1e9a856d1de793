"""Service for monthly slip ("boleto") settings and generation."""

import inspect
import logging
from decimal import Decimal
from typing import Awaitable, Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.errors import BackendError, ConfirmationRequiredError, ValidationError
from src.models.slip_settings import SlipSettings
from src.schemas.slips import SlipGenerationResult, SlipSettingsPayload
from src.services.backend_client import BackendClient
from src.services.gas_service import GasService
from src.services.parsers import (
    format_target_month,
    parse_amount_to_cents,
    parse_fee_amount,
    parse_reading,
    parse_target_month,
)

logger = logging.getLogger(__name__)

GENERATION_ERROR = "Failed to generate the slips."

Confirm = Callable[[str], bool | Awaitable[bool]]

_SETTING_LABELS = {
    "extra_fee": "extra fee",
    "reserve_fund": "reserve fund",
    "gas_unit_price": "gas unit price",
}


def _cents(text: str) -> int:
    return parse_amount_to_cents(parse_fee_amount(text))


def gas_unit_price(settings: SlipSettingsPayload) -> Decimal:
    """Gas price per unit of consumption; zero when not set."""
    return parse_fee_amount(settings.gas_unit_price)


def check_target_month(target_month: str) -> tuple[int, int]:
    """Parse "YYYY-MM", raising ValidationError for bad input."""
    try:
        return parse_target_month(target_month)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def normalize_target_month(target_month: str) -> str:
    """Validated "YYYY-MM" key used for storage and the backend request."""
    return format_target_month(*check_target_month(target_month))


class SlipService:
    """Slip generation against /api/v1/slips/generation.

    The month's fee settings and gas readings live in the local draft store
    and are sent along with the generation request.
    """

    def __init__(self, client: BackendClient, db_session: Session):
        self.client = client
        self.db = db_session

    def get_settings(self, target_month: str) -> SlipSettingsPayload:
        stored = self._get_stored_settings(normalize_target_month(target_month))
        if stored is None:
            return SlipSettingsPayload()
        return SlipSettingsPayload.model_validate(stored)

    def save_settings(self, target_month: str, settings: SlipSettingsPayload) -> SlipSettingsPayload:
        target_month = normalize_target_month(target_month)
        values = {field: getattr(settings, field).strip() for field in _SETTING_LABELS}
        for field, value in values.items():
            try:
                parse_fee_amount(value)
            except ValueError as e:
                raise ValidationError(f"Invalid {_SETTING_LABELS[field]}: {value}") from e

        stored = self._get_stored_settings(target_month)
        if stored is None:
            stored = SlipSettings(target_month=target_month)
            self.db.add(stored)
        stored.extra_fee = values["extra_fee"]
        stored.reserve_fund = values["reserve_fund"]
        stored.gas_unit_price = values["gas_unit_price"]
        self.db.commit()
        logger.info("Slip settings saved for %s", target_month)
        return SlipSettingsPayload.model_validate(stored)

    def _get_stored_settings(self, target_month: str) -> SlipSettings | None:
        stmt = select(SlipSettings).where(SlipSettings.target_month == target_month)
        return self.db.execute(stmt).scalar_one_or_none()

    def build_request(self, target_month: str, force: bool) -> dict:
        """Request body: target month, force flag, fees and the month's gas consumption."""
        target_month = normalize_target_month(target_month)
        year, month = parse_target_month(target_month)
        settings = self.get_settings(target_month)

        readings = GasService(self.db).readings_for_month(year, month, unit_price=gas_unit_price(settings))
        return {
            "targetMonth": target_month,
            "force": force,
            "extraFee": _cents(settings.extra_fee),
            "reserveFund": _cents(settings.reserve_fund),
            "gasUnitPrice": _cents(settings.gas_unit_price),
            "gasConsumptions": [
                {
                    "residentUnitId": reading.resident_unit_id,
                    "previousReading": str(reading.previous_reading),
                    "currentReading": str(parse_reading(reading.current_reading)),
                    "consumption": str(reading.consumption),
                    "amount": parse_amount_to_cents(reading.value),
                }
                for reading in readings
            ],
        }

    async def generate(self, target_month: str, force: bool = False) -> SlipGenerationResult:
        """Ask the backend to generate the month's slips.

        Raises:
            ValidationError: Target month is not "YYYY-MM"
            ConfirmationRequiredError: Slips already exist (backend 409); retry with force
            BackendError: Any other backend failure
        """
        body = self.build_request(target_month, force)
        target_month = body["targetMonth"]

        try:
            response = await self.client.post(
                "/api/v1/slips/generation",
                json=body,
                error_message=GENERATION_ERROR,
            )
        except BackendError as e:
            if e.status_code == 409 and not force:
                raise ConfirmationRequiredError(
                    e.message
                    if e.message != GENERATION_ERROR
                    else f"Slips for {target_month} already exist. Generate them again?"
                ) from e
            raise

        logger.info("Slips generated for %s (force=%s)", target_month, force)
        return SlipGenerationResult(target_month=target_month, forced=force, generated=True, response=response)

    async def generate_with_confirmation(self, target_month: str, confirm: Confirm) -> SlipGenerationResult:
        """Generate slips, asking ``confirm`` before regenerating existing ones.

        ``confirm`` receives the backend's message and may be sync or async.
        Declining returns a result with ``generated=False``.
        """
        target_month = normalize_target_month(target_month)
        try:
            return await self.generate(target_month, force=False)
        except ConfirmationRequiredError as e:
            answer = confirm(e.message)
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                logger.info("Slip regeneration for %s declined", target_month)
                return SlipGenerationResult(target_month=target_month, forced=False, generated=False)

        logger.info("Slip regeneration for %s confirmed, retrying with force", target_month)
        return await self.generate(target_month, force=True)


__all__ = [
    "GENERATION_ERROR",
    "SlipService",
    "check_target_month",
    "gas_unit_price",
    "normalize_target_month",
]
