"""Deactivate leads that have been inactive for a certain period of time.

Usage:
    python -m app.scripts.deactivate_old_leads
    python -m app.scripts.deactivate_old_leads --days=120 --status=not_converted
    python -m app.scripts.deactivate_old_leads --dry-run
    python -m app.scripts.deactivate_old_leads --no-interaction

Exits 0 whenever the run completes, including "nothing to do", dry runs
and a declined confirmation.
"""

import argparse
import asyncio
import logging
import sys

from app.core.config import settings
from app.core.database import async_session, engine
from app.models.enums import LeadStatus
from app.services.lead_deactivation import ConsoleReporter, LeadDeactivationJob


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid day count: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError("days must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deactivate leads that have been inactive for a certain period of time"
    )
    parser.add_argument(
        "--days",
        type=positive_int,
        default=None,
        help=f"Days without updates after which leads are deactivated (default: {settings.LEAD_AUTO_DEACTIVATE_DAYS})",
    )
    parser.add_argument(
        "--status",
        choices=[s.value for s in LeadStatus],
        default=None,
        help="Only deactivate leads with this status (e.g., not_converted)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deactivated without actually doing it",
    )
    parser.add_argument(
        "--no-interaction",
        action="store_true",
        help="Do not ask for confirmation",
    )
    return parser


async def run(args: argparse.Namespace, session_factory=None, reporter=None):
    job = LeadDeactivationJob(
        settings.lead_deactivation(),
        session_factory or async_session,
        reporter=reporter or ConsoleReporter(),
    )
    return await job.run(
        days=args.days,
        status=args.status,
        dry_run=args.dry_run,
        interactive=not args.no_interaction,
    )


def main(argv=None) -> int:
    """Parse CLI arguments and run the deactivation job."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    async def _run():
        try:
            return await run(args)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    return 0


if __name__ == "__main__":
    sys.exit(main())
