"""Tests for the slips CLI."""

from unittest.mock import patch

import pytest

from src.cli import slips
from src.services.backend_client import BackendClient
from src.services.config import get_settings

GENERATION_PATH = "/api/v1/slips/generation"


@pytest.fixture
def patched_client(backend_client):
    with patch.object(BackendClient, "from_settings", return_value=backend_client):
        yield backend_client


@pytest.fixture(autouse=True)
def no_log_setup():
    with patch("src.cli.slips.setup_server_logging"):
        yield


def test_format_cents():
    assert slips.format_cents(123456) == "R$ 1.234,56"
    assert slips.format_cents(5) == "R$ 0,05"
    assert slips.format_cents(-2550) == "R$ -25,50"


@pytest.mark.asyncio
@pytest.mark.parametrize("answer,expected", [("y", True), (" YES ", True), ("n", False), ("", False)])
async def test_ask_confirmation(answer, expected):
    with patch("builtins.input", return_value=answer):
        assert await slips.ask_confirmation("Generate again?") is expected


@pytest.mark.integration
@pytest.mark.asyncio
async def test_generate_new_slips(backend, patched_client, capsys):
    backend.on("POST", GENERATION_PATH, status_code=201)

    exit_code = await slips.generate(get_settings(), "2025-05", assume_yes=False)

    assert exit_code == 0
    assert "Slips for 2025-05 generated." in capsys.readouterr().out


@pytest.mark.integration
@pytest.mark.asyncio
async def test_generate_with_yes_skips_prompt(backend, patched_client, capsys):
    backend.on("POST", GENERATION_PATH, status_code=409, json_body={"message": "Already generated"})
    backend.on("POST", GENERATION_PATH, status_code=201)

    with patch("builtins.input") as mock_input:
        exit_code = await slips.generate(get_settings(), "2025-05", assume_yes=True)

    assert exit_code == 0
    mock_input.assert_not_called()
    assert "(regenerated)" in capsys.readouterr().out


@pytest.mark.integration
@pytest.mark.asyncio
async def test_generate_declined(backend, patched_client):
    backend.on("POST", GENERATION_PATH, status_code=409, json_body={"message": "Already generated"})

    with patch("builtins.input", return_value="n") as mock_input:
        exit_code = await slips.generate(get_settings(), "2025-05", assume_yes=False)

    assert exit_code == 1
    mock_input.assert_called_once_with("Already generated [y/N] ")
    assert len(backend.calls("POST", GENERATION_PATH)) == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_preview_prints_table(backend, patched_client, capsys):
    backend.on("GET", "/api/v1/expense-types", json_body=[{"id": "t1", "name": "Gás"}])
    backend.on(
        "GET",
        "/api/v1/recurring-expenses/pending-monthly/5/2025",
        json_body=[{"id": "p1", "type": "t1", "dueDay": 10, "description": "Gás central", "amount": 0}],
    )
    backend.on(
        "GET",
        "/api/v1/expenses/date-range/2025/5",
        json_body=[
            {
                "id": "e1",
                "description": "Elevador",
                "amount": 123456,
                "dueDate": "2025-05-05",
                "type": {"id": "t1", "name": "Gás"},
            }
        ],
    )

    exit_code = await slips.preview(get_settings(), "2025-05")

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "05/05/2025" in out
    assert "R$ 1.234,56" in out
    assert "forecast" in out
    assert "2 expenses, total R$ 1.234,56" in out


@pytest.mark.integration
@pytest.mark.asyncio
async def test_main_invalid_month_exits_1(backend, patched_client):
    assert await slips.main(["generate", "2025-13", "--yes"]) == 1
    assert backend.requests == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_main_backend_failure_exits_1(backend, patched_client):
    backend.on("POST", GENERATION_PATH, status_code=500)

    assert await slips.main(["generate", "2025-05", "--yes"]) == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_main_set_token(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert await slips.main(["set-token", "abc123"]) == 0
    assert (tmp_path / get_settings().token_file).read_text(encoding="utf-8") == "abc123"


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        slips.build_parser().parse_args([])
