#!/usr/bin/env python3
"""Command-line interface for ynab-sync."""

import argparse
import logging
import sys
from pathlib import Path

from ynab_sync.config import (
    get_category_mapping_path,
    get_n26_credentials,
    get_ynab_account_id,
    get_ynab_budget_id,
    get_ynab_token,
    load_config,
    require,
)
from ynab_sync.errors import ApplyAborted, SyncError
from ynab_sync.logging_setup import configure_logging
from ynab_sync.models import ApplyReport, SyncSettings
from ynab_sync.window import parse_sync_from


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ynab-sync",
        description="Sync N26 transactions into a YNAB account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ynab-sync --sync-from 2024-01-01 --n26-category-mapping categories.json
  ynab-sync --sync-from 2024-01-01 --n26-category-mapping categories.json --dry-run
  ynab-sync --sync-from 2024-01-01 --n26-category-mapping categories.json --ynab-force-update

Credentials are read from the command line, the YNAB_TOKEN, N26_USERNAME and
N26_PASSWORD environment variables, or config.json.
        """,
    )

    parser.add_argument(
        "--sync-from",
        required=True,
        metavar="YYYY-MM-DD",
        help="Date (including) when to sync from",
    )
    parser.add_argument(
        "--n26-category-mapping",
        metavar="FILE",
        help="JSON file which represents the mapping between N26 and YNAB category",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be synced without writing to YNAB",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=100_000_000,
        help="Maximum number of N26 transactions to fetch",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print warnings and errors",
    )

    # YNAB
    parser.add_argument(
        "--ynab-token",
        help="YNAB personal access token (or YNAB_TOKEN / config.json)",
    )
    parser.add_argument(
        "--ynab-budget-id",
        help="YNAB budget id",
    )
    parser.add_argument(
        "--ynab-account-id",
        help="YNAB account id",
    )
    parser.add_argument(
        "--ynab-force-update",
        action="store_true",
        help="Overwrite category, memo and status of already synced transactions",
    )

    # N26
    parser.add_argument(
        "--n26-username",
        help="N26 username (or N26_USERNAME / config.json)",
    )
    parser.add_argument(
        "--n26-password",
        help="N26 password (or N26_PASSWORD / config.json)",
    )

    return parser


def print_report(report: ApplyReport) -> None:
    """Print the sync summary."""
    print("\nSync complete:", file=sys.stderr)
    print(f"  Created: {report.created}", file=sys.stderr)
    print(f"  Updated: {report.updated}", file=sys.stderr)
    print(f"  Skipped (already synced): {report.skipped}", file=sys.stderr)
    if report.failed:
        print(f"  Errors: {len(report.failed)}", file=sys.stderr)
        for error in report.failed:
            print(f"    - {error.import_id}: {error.message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    from ynab_sync.n26 import N26Client
    from ynab_sync.sync import StageFailed, run_sync
    from ynab_sync.ynab import YNABClient

    try:
        if args.verbose:
            configure_logging(logging.DEBUG)
        elif args.quiet:
            configure_logging(logging.WARNING)
        else:
            configure_logging()

        # A bad date is reported before any missing setting
        parse_sync_from(args.sync_from)
        config = load_config(args.config)

        mapping_path = get_category_mapping_path(config, args.n26_category_mapping)
        settings = SyncSettings(
            sync_from=args.sync_from,
            category_mapping_file=Path(
                require(
                    str(mapping_path) if mapping_path else None,
                    "Category mapping file",
                    "--n26-category-mapping",
                )
            ),
            budget_id=require(
                get_ynab_budget_id(config, args.ynab_budget_id),
                "YNAB budget id",
                "--ynab-budget-id",
            ),
            account_id=require(
                get_ynab_account_id(config, args.ynab_account_id),
                "YNAB account id",
                "--ynab-account-id",
            ),
            force_update=args.ynab_force_update,
            dry_run=args.dry_run,
            transaction_limit=args.limit,
        )
        token = require(get_ynab_token(config, args.ynab_token), "YNAB token", "--ynab-token")
        credentials = get_n26_credentials(config, args.n26_username, args.n26_password)

        report = run_sync(
            settings,
            bank=N26Client(),
            ledger=YNABClient(token),
            credentials=credentials,
            report=(lambda line: None) if args.quiet else print,
        )
    except SyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        cause = e.error if isinstance(e, StageFailed) else e
        if isinstance(cause, ApplyAborted):
            print_report(cause.report)
        return 1

    if settings.dry_run:
        return 0

    print_report(report)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
