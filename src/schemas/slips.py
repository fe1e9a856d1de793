"""Slip generation schemas."""

from typing import Any

from src.schemas.base import CamelModel


class SlipSettingsPayload(CamelModel):
    """Per-month slip settings, kept as typed ("0,00")."""

    extra_fee: str = ""
    reserve_fund: str = ""
    gas_unit_price: str = ""


class SlipGenerationRequest(CamelModel):
    """Generate slips for a month; force regenerates existing ones."""

    target_month: str
    force: bool = False


class SlipGenerationResult(CamelModel):
    """Outcome of a generation request."""

    target_month: str
    forced: bool = False
    generated: bool = False
    response: Any = None
