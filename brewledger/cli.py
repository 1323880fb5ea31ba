"""
BrewLedger operator CLI.

Usage:
    brewledger years                          List years (creates the current one on an empty store)
    brewledger create-year 2025 [--from 2024] Create a year, optionally carrying stock forward
    brewledger status 2024                    Run the expiry reconciliation and print the report
    brewledger snapshot 2024                  Print every projection of a year as JSON
    brewledger export backup.json             Write all years to a backup file
    brewledger import backup.json             Replace the store with a backup file
    brewledger reset                          Delete every year (asks twice)
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

from brewledger.application.dto.requests import CreateYearRequest
from brewledger.application.use_cases import (
    BackupUseCase,
    CheckWarehouseStatusUseCase,
    LedgerSnapshotUseCase,
    YearLifecycleUseCase,
)
from brewledger.config import command_context, configure_logging, get_logger
from brewledger.core.exceptions import BrewLedgerError, DuplicateYearError
from brewledger.core.values import parse_ledger_date
from brewledger.infrastructure.storage.sqlite import close_database
from brewledger.infrastructure.storage.sqlite.migrations import initialize_database

logger = get_logger(__name__)


def _confirm(question: str) -> bool:
    answer = input(f"{question} [y/N] ").strip().lower()
    return answer in ("y", "yes")


async def cmd_years(args: argparse.Namespace) -> None:
    for year in await YearLifecycleUseCase().list_years():
        print(year)


async def cmd_create_year(args: argparse.Namespace) -> None:
    result = await YearLifecycleUseCase().create(
        CreateYearRequest(new_year=args.year, import_from=args.import_from)
    )
    if not result.created:
        raise DuplicateYearError(args.year)
    print(f"Year {result.year} created.")
    if args.import_from:
        print(f"  Opening movements:  {result.carried_movements}")
        print(f"  Opening beer lines: {result.carried_beer_lines}")


async def cmd_status(args: argparse.Namespace) -> None:
    today = parse_ledger_date(args.today) if args.today else date.today()
    status = await CheckWarehouseStatusUseCase().execute(args.year, today)
    print(status.model_dump_json(by_alias=True, indent=2))


async def cmd_snapshot(args: argparse.Namespace) -> None:
    snapshot = await LedgerSnapshotUseCase().execute(args.year)
    print(snapshot.model_dump_json(indent=2))


async def cmd_export(args: argparse.Namespace) -> None:
    payload = await BackupUseCase().export_json()
    Path(args.path).write_text(payload, encoding="utf-8")
    print(f"Backup written to {args.path}")


async def cmd_import(args: argparse.Namespace) -> None:
    payload = Path(args.path).read_text(encoding="utf-8")
    if not args.yes and not _confirm("Importing replaces every stored year. Continue?"):
        print("Import cancelled.")
        return
    years = await BackupUseCase().import_all(payload)
    print(f"Imported years: {', '.join(years) or '(none)'}")


async def cmd_reset(args: argparse.Namespace) -> None:
    questions = [
        "Delete every year from the store?",
        "This cannot be undone. Really delete everything?",
    ]
    for question in questions[args.yes :]:
        if not _confirm(question):
            print("Reset cancelled.")
            return
    await BackupUseCase().reset()
    print("Store reset.")


async def _run(args: argparse.Namespace) -> None:
    with command_context(args.command, year=getattr(args, "year", None)):
        try:
            await initialize_database()
            await args.func(args)
        finally:
            await close_database()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="BrewLedger operator CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # years
    p_years = sub.add_parser("years", help="List stored years")
    p_years.set_defaults(func=cmd_years)

    # create-year
    p_create = sub.add_parser("create-year", help="Create a fiscal year")
    p_create.add_argument("year", help="Year to create, e.g. 2025")
    p_create.add_argument(
        "--from", dest="import_from", default=None, help="Carry closing stock from this year"
    )
    p_create.set_defaults(func=cmd_create_year)

    # status
    p_status = sub.add_parser("status", help="Reconcile expiries and print the status report")
    p_status.add_argument("year")
    p_status.add_argument("--today", default=None, help="Reference date dd/mm/yyyy")
    p_status.set_defaults(func=cmd_status)

    # snapshot
    p_snapshot = sub.add_parser("snapshot", help="Print the projections of a year")
    p_snapshot.add_argument("year")
    p_snapshot.set_defaults(func=cmd_snapshot)

    # export
    p_export = sub.add_parser("export", help="Write all years to a JSON backup")
    p_export.add_argument("path")
    p_export.set_defaults(func=cmd_export)

    # import
    p_import = sub.add_parser("import", help="Replace the store with a JSON backup")
    p_import.add_argument("path")
    p_import.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    p_import.set_defaults(func=cmd_import)

    # reset
    p_reset = sub.add_parser("reset", help="Delete every year")
    p_reset.add_argument(
        "--yes", action="count", default=0, help="Skip one confirmation (give twice to skip both)"
    )
    p_reset.set_defaults(func=cmd_reset)

    args = parser.parse_args()
    configure_logging()
    try:
        asyncio.run(_run(args))
    except BrewLedgerError as e:
        logger.error("command_failed", command=args.command, error=e.code)
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
