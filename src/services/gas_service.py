"""Service for gas meter readings and consumption charges per resident unit."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.gas_reading import GasReadingDraft
from src.schemas.gas import GasReading
from src.schemas.units import ResidentUnit
from src.services.parsers import CENT, format_target_month, parse_reading, sanitize_reading

logger = logging.getLogger(__name__)


def calculate_consumption(previous_reading: Decimal, current_reading: Decimal) -> Decimal:
    """Consumed m³ since the previous reading; a lower or equal reading counts as zero."""
    if current_reading > previous_reading:
        return current_reading - previous_reading
    return Decimal(0)


def calculate_charge(consumption: Decimal, unit_price: Decimal) -> Decimal:
    """Gas charge in reais, rounded to cents."""
    return (consumption * unit_price).quantize(CENT, rounding=ROUND_HALF_UP)


class GasService:
    """Gas reading drafts stored locally until the slips are generated."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def get_draft(self, target_month: str, unit_id: str) -> GasReadingDraft | None:
        stmt = select(GasReadingDraft).where(
            GasReadingDraft.target_month == target_month,
            GasReadingDraft.resident_unit_id == unit_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def drafts_for_month(self, target_month: str) -> list[GasReadingDraft]:
        stmt = (
            select(GasReadingDraft)
            .where(GasReadingDraft.target_month == target_month)
            .order_by(GasReadingDraft.unit_label)
        )
        return list(self.db.execute(stmt).scalars().all())

    def previous_readings(self, target_month: str, unit_ids: list[str]) -> dict[str, Decimal]:
        """Latest reading of each unit in a month before ``target_month`` (0 when none)."""
        if not unit_ids:
            return {}

        stmt = (
            select(GasReadingDraft)
            .where(
                GasReadingDraft.resident_unit_id.in_(unit_ids),
                GasReadingDraft.target_month < target_month,
            )
            .order_by(GasReadingDraft.resident_unit_id, GasReadingDraft.target_month.desc())
        )
        latest: dict[str, Decimal] = {}
        for draft in self.db.execute(stmt).scalars().all():
            if draft.resident_unit_id in latest:
                continue
            reading = parse_reading(draft.current_reading)
            if reading > 0:
                latest[draft.resident_unit_id] = reading

        return {unit_id: latest.get(unit_id, Decimal(0)) for unit_id in unit_ids}

    def readings_for_month(
        self,
        year: int,
        month: int,
        units: list[ResidentUnit] | None = None,
        unit_price: Decimal = Decimal(0),
    ) -> list[GasReading]:
        """One reading per unit with its consumption and charge.

        Args:
            year: Target year
            month: Target month (1..12)
            units: Active units; when None, only units with a saved reading are listed
            unit_price: Price per m³ in reais
        """
        target_month = format_target_month(year, month)
        drafts = {d.resident_unit_id: d for d in self.drafts_for_month(target_month)}

        if units is None:
            rows = [(d.resident_unit_id, d.unit_label) for d in drafts.values()]
        else:
            rows = [(u.id, u.unit) for u in units]

        previous = self.previous_readings(target_month, [unit_id for unit_id, _ in rows])

        readings = []
        for unit_id, label in rows:
            draft = drafts.get(unit_id)
            current_text = draft.current_reading if draft else ""
            consumption = calculate_consumption(previous[unit_id], parse_reading(current_text))
            readings.append(
                GasReading(
                    resident_unit_id=unit_id,
                    unit=label,
                    previous_reading=previous[unit_id],
                    current_reading=current_text,
                    consumption=consumption,
                    value=calculate_charge(consumption, unit_price),
                )
            )
        return readings

    def save_reading(
        self,
        year: int,
        month: int,
        unit_id: str,
        unit_label: str,
        current_reading: str,
    ) -> GasReadingDraft:
        """Store the typed reading of a unit for a month (insert or update)."""
        target_month = format_target_month(year, month)
        cleaned = sanitize_reading(current_reading)

        draft = self.get_draft(target_month, unit_id)
        if draft is None:
            draft = GasReadingDraft(
                target_month=target_month,
                resident_unit_id=unit_id,
                unit_label=unit_label or "",
                current_reading=cleaned,
            )
            self.db.add(draft)
        else:
            draft.current_reading = cleaned
            if unit_label:
                draft.unit_label = unit_label

        self.db.commit()
        self.db.refresh(draft)
        logger.info(
            "Gas reading saved: month=%s unit=%s reading=%s", target_month, unit_label, cleaned
        )
        return draft


__all__ = ["GasService", "calculate_charge", "calculate_consumption"]
