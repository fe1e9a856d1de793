"""CLI for monthly slip generation.

Usage:
    python -m src.cli.slips generate 2025-03          (asks before regenerating)
    python -m src.cli.slips generate 2025-03 --yes    (regenerates without asking)
    python -m src.cli.slips preview 2025-03           (prints the month's expenses)
    python -m src.cli.slips set-token <TOKEN>         (stores the backend token)

Exit Codes:
    0 - Success
    1 - Failure, or regeneration declined
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal

from dotenv import load_dotenv

from src.api.errors import AppError, BackendError
from src.services.config import Settings, TokenStore, get_settings
from src.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


def format_cents(cents: int) -> str:
    """Format cents as "R$ 1.234,56"."""
    amount = f"{Decimal(cents) / 100:,.2f}"
    return "R$ " + amount.replace(",", "_").replace(".", ",").replace("_", ".")


async def ask_confirmation(message: str) -> bool:
    """Ask on the terminal; only "y"/"yes" confirms."""
    answer = await asyncio.to_thread(input, f"{message} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def generate(settings: Settings, target_month: str, assume_yes: bool) -> int:
    from src.services import SessionLocal, init_db
    from src.services.backend_client import BackendClient
    from src.services.slip_service import SlipService

    init_db()
    db = SessionLocal()
    try:
        async with BackendClient.from_settings(settings) as client:
            service = SlipService(client, db)
            confirm = (lambda message: True) if assume_yes else ask_confirmation
            result = await service.generate_with_confirmation(target_month, confirm)
    finally:
        db.close()

    if not result.generated:
        print(f"Slips for {target_month} were not regenerated.")
        return 1
    print(f"Slips for {target_month} generated{' (regenerated)' if result.forced else ''}.")
    return 0


async def preview(settings: Settings, target_month: str) -> int:
    from src.services.backend_client import BackendClient
    from src.services.expense_service import ExpenseService
    from src.services.reference_service import ReferenceService
    from src.services.slip_service import check_target_month

    year, month = check_target_month(target_month)
    async with BackendClient.from_settings(settings) as client:
        expense_types = await ReferenceService(client).get_expense_types()
        rows = await ExpenseService(client).monthly_expenses(year, month, expense_types)

    total = 0
    for row in rows:
        due = row.due_date.strftime("%d/%m/%Y") if row.due_date else "-"
        print(
            f"{due:<10}  {row.description[:40]:<40}  {row.expense_type.name[:20]:<20}  "
            f"{format_cents(row.amount):>16}  {row.status.value}"
        )
        total += row.amount
    print(f"{len(rows)} expenses, total {format_cents(total)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Monthly slip generation")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate the slips of a month")
    generate_parser.add_argument("target_month", help="Target month as YYYY-MM")
    generate_parser.add_argument(
        "--yes", action="store_true", help="Regenerate existing slips without asking"
    )

    preview_parser = subparsers.add_parser("preview", help="Print the expenses of a month")
    preview_parser.add_argument("target_month", help="Target month as YYYY-MM")

    token_parser = subparsers.add_parser("set-token", help="Store the backend bearer token")
    token_parser.add_argument("token")
    return parser


async def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the slips CLI.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = get_settings()
    setup_server_logging(log_file="logs/slips.log", level_name=settings.log_level)

    try:
        if args.command == "set-token":
            TokenStore.from_settings(settings).set(args.token)
            logger.info("Backend token stored in %s", settings.token_file)
            return 0
        if args.command == "preview":
            return await preview(settings, args.target_month)
        return await generate(settings, args.target_month, args.yes)
    except (AppError, BackendError) as e:
        logger.error("%s failed: %s", args.command, e.message)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
