import pytest

from src.api.errors import BackendError
from src.services.reference_service import (
    GENERAL_UNIT_LABEL,
    ReferenceService,
    parse_accounts,
)

EXPENSE_TYPES = [
    {"id": "t1", "name": "Gás", "distributionMethod": "consumption"},
    {"id": "t2", "name": "Manutenção", "distributionMethod": "ideal_fraction"},
]
UNITS = [{"id": "r1", "unit": "101"}, {"id": "r2", "unit": "102"}]
ACCOUNTS = {"accounts": [{"id": "a1", "name": "Caixa", "code": "CX"}], "qtd": 1}


def test_parse_accounts_accepts_wrapper_and_list():
    assert [a.id for a in parse_accounts(ACCOUNTS)] == ["a1"]
    assert [a.id for a in parse_accounts(ACCOUNTS["accounts"])] == ["a1"]
    assert parse_accounts(None) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_load_fetches_everything(backend, backend_client):
    backend.on("GET", "/api/v1/expense-types", json_body=EXPENSE_TYPES)
    backend.on("GET", "/api/v1/resident-unit/actives", json_body=UNITS)
    backend.on("GET", "/api/v1/accounts", json_body=ACCOUNTS)

    data = await ReferenceService(backend_client).load()

    assert [t.name for t in data.expense_types] == ["Gás", "Manutenção"]
    assert [u.unit for u in data.resident_units] == ["101", "102"]
    assert [a.code for a in data.accounts] == ["CX"]

    assert data.expense_type("t2").name == "Manutenção"
    assert data.expense_type("zzz").name == "Unknown type"
    assert data.unit_label("r2") == "102"
    assert data.unit_label(None) == GENERAL_UNIT_LABEL
    assert data.unit_label("missing") == GENERAL_UNIT_LABEL


@pytest.mark.unit
@pytest.mark.asyncio
async def test_load_fails_when_one_list_fails(backend, backend_client):
    backend.on("GET", "/api/v1/expense-types", json_body=EXPENSE_TYPES)
    backend.on("GET", "/api/v1/resident-unit/actives", status_code=500)
    backend.on("GET", "/api/v1/accounts", json_body=ACCOUNTS)

    with pytest.raises(BackendError, match="Failed to load resident units."):
        await ReferenceService(backend_client).load()
