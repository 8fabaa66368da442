"""Deactivation of stale leads.

A lead is stale when it is still active and has not been updated for at
least ``threshold_days`` days. The job selects stale leads, reports them,
optionally asks for confirmation, then flips ``is_active`` off one lead at a
time so a failure on one record never aborts the batch.

Used by the ``deactivate_old_leads`` CLI and the scheduled Celery task.
"""

import enum
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Protocol, Sequence, Union

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import LeadDeactivationConfig
from app.models.customer import Customer  # noqa: F401  (Lead relationship target)
from app.models.enums import LeadStatus
from app.models.lead import Lead
from app.models.user import User  # noqa: F401  (Lead relationship target)
from app.services.audit_service import log_event

logger = logging.getLogger(__name__)

TABLE_HEADERS = ["ID", "Lead Name", "Status", "Updated At", "Days Inactive"]


class DeactivationOutcome(str, enum.Enum):
    NOTHING_TO_DO = "nothing_to_do"
    DRY_RUN = "dry_run"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StaleLead:
    """Snapshot of a candidate taken at selection time."""
    id: int
    lead_name: str
    status: LeadStatus
    updated_at: datetime
    days_inactive: int

    @classmethod
    def from_lead(cls, lead: Lead, now: datetime) -> "StaleLead":
        return cls(
            id=lead.id,
            lead_name=lead.lead_name,
            status=lead.status,
            updated_at=lead.updated_at,
            days_inactive=(now - lead.updated_at).days,
        )

    def as_row(self) -> List[str]:
        return [
            str(self.id),
            self.lead_name,
            self.status.value,
            self.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
            str(self.days_inactive),
        ]


@dataclass
class DeactivationResult:
    outcome: DeactivationOutcome
    threshold_days: int
    status_filter: Optional[LeadStatus] = None
    candidates: List[StaleLead] = field(default_factory=list)
    deactivated_count: int = 0
    failed_ids: List[int] = field(default_factory=list)
    skipped_ids: List[int] = field(default_factory=list)

    def summary(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "threshold_days": self.threshold_days,
            "status_filter": self.status_filter.value if self.status_filter else None,
            "candidates": len(self.candidates),
            "deactivated_count": self.deactivated_count,
            "failed_ids": list(self.failed_ids),
            "skipped_ids": list(self.skipped_ids),
        }


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

def parse_status(status: Union[LeadStatus, str, None]) -> Optional[LeadStatus]:
    """Coerce a status filter to LeadStatus. Empty means no filter."""
    if status is None or status == "":
        return None
    if isinstance(status, LeadStatus):
        return status
    try:
        return LeadStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in LeadStatus)
        raise ValueError(f"Invalid status {status!r}. Must be one of: {allowed}") from None


def _validate_threshold(threshold_days) -> int:
    if isinstance(threshold_days, bool) or not isinstance(threshold_days, int) or threshold_days < 1:
        raise ValueError(f"threshold_days must be a positive integer, got {threshold_days!r}")
    return threshold_days


def stale_leads_query(
    threshold_days: int,
    status: Union[LeadStatus, str, None] = None,
    now: Optional[datetime] = None,
) -> Select:
    """Build the query for active leads not updated in ``threshold_days`` days."""
    threshold_days = _validate_threshold(threshold_days)
    status = parse_status(status)
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=threshold_days)

    query = select(Lead).where(
        Lead.is_active.is_(True),
        Lead.updated_at <= cutoff,
    )
    if status is not None:
        query = query.where(Lead.status == status)

    return query.order_by(Lead.id)


async def select_stale_leads(
    db: AsyncSession,
    threshold_days: int,
    status: Union[LeadStatus, str, None] = None,
    now: Optional[datetime] = None,
) -> List[Lead]:
    """Return stale leads. An empty list is a normal result."""
    result = await db.execute(stale_leads_query(threshold_days, status, now))
    return list(result.scalars().all())


async def deactivate_lead(db: AsyncSession, lead_id: int) -> bool:
    """Flip a single lead to inactive. Bumps updated_at via onupdate.

    Returns False when no row matched, e.g. the lead was deleted after selection.
    """
    result = await db.execute(
        update(Lead).where(Lead.id == lead_id).values(is_active=False)
    )
    return result.rowcount > 0


# ---------------------------------------------------------------------------
# Reporters
# ---------------------------------------------------------------------------

class DeactivationReporter(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None: ...

    def confirm(self, question: str, default: bool = True) -> bool: ...


class ConsoleReporter:
    """Human-facing reporter for the CLI."""

    def __init__(self, stdout=None, stderr=None, input_func=input):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.input_func = input_func

    def info(self, message: str) -> None:
        print(message, file=self.stdout)

    def warn(self, message: str) -> None:
        print(f"WARNING: {message}", file=self.stdout)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=self.stderr)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        widths = [len(h) for h in headers]
        for row in rows:
            widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

        border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

        def fmt(cells):
            return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

        lines = [border, fmt(headers), border]
        lines.extend(fmt(row) for row in rows)
        lines.append(border)
        print("\n".join(lines), file=self.stdout)

    def confirm(self, question: str, default: bool = True) -> bool:
        suffix = " [Y/n] " if default else " [y/N] "
        try:
            answer = self.input_func(question + suffix)
        except EOFError:
            return default
        answer = answer.strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")


class LoggingReporter:
    """Reporter for scheduled runs: no human-facing channel, never blocks."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def info(self, message: str) -> None:
        self.log.debug(message)

    def warn(self, message: str) -> None:
        self.log.debug(message)

    def error(self, message: str) -> None:
        # Failures are already logged as structured entries by the job
        self.log.debug(message)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.log.debug("%d candidate row(s)", len(rows))

    def confirm(self, question: str, default: bool = True) -> bool:
        return True


# ---------------------------------------------------------------------------
# Job
# ---------------------------------------------------------------------------

class LeadDeactivationJob:
    """Select -> report -> confirm -> deactivate -> audit.

    Candidates are a snapshot taken at selection time; they are not re-checked
    before being deactivated.
    """

    def __init__(
        self,
        config: LeadDeactivationConfig,
        session_factory: async_sessionmaker,
        reporter: Optional[DeactivationReporter] = None,
    ):
        self.config = config
        self.session_factory = session_factory
        self.reporter = reporter or LoggingReporter()

    async def run(
        self,
        days: Optional[int] = None,
        status: Union[LeadStatus, str, None] = None,
        dry_run: bool = False,
        interactive: bool = True,
        now: Optional[datetime] = None,
    ) -> DeactivationResult:
        threshold_days = _validate_threshold(days if days is not None else self.config.after_days)
        status_filter = parse_status(status)
        now = now or datetime.utcnow()
        reporter = self.reporter

        reporter.info(f"Checking for leads older than {threshold_days} days...")
        if status_filter is not None:
            reporter.info(f"Filtering by status: {status_filter.value}")

        result = DeactivationResult(
            outcome=DeactivationOutcome.NOTHING_TO_DO,
            threshold_days=threshold_days,
            status_filter=status_filter,
        )

        async with self.session_factory() as db:
            leads = await select_stale_leads(db, threshold_days, status_filter, now)
            result.candidates = [StaleLead.from_lead(lead, now) for lead in leads]
            count = len(result.candidates)

            if count == 0:
                reporter.info("No leads found to deactivate.")
                return result

            reporter.info(f"Found {count} lead(s) to deactivate:")
            reporter.table(TABLE_HEADERS, [c.as_row() for c in result.candidates])

            if dry_run:
                reporter.warn("Dry run mode - no changes made.")
                result.outcome = DeactivationOutcome.DRY_RUN
                return result

            if interactive and not reporter.confirm(f"Do you want to deactivate these {count} lead(s)?", True):
                reporter.info("Operation cancelled.")
                result.outcome = DeactivationOutcome.CANCELLED
                return result

            await self._apply(db, result)

            reporter.info(f"Successfully deactivated {result.deactivated_count} lead(s).")
            result.outcome = DeactivationOutcome.COMPLETED

            await log_event(
                db,
                "leads_deactivated",
                {
                    "deactivated_count": result.deactivated_count,
                    "threshold_days": threshold_days,
                    "status_filter": status_filter.value if status_filter else None,
                },
            )

        return result

    async def _apply(self, db: AsyncSession, result: DeactivationResult) -> None:
        for candidate in result.candidates:
            try:
                updated = await deactivate_lead(db, candidate.id)
                await db.commit()
                if not updated:
                    result.skipped_ids.append(candidate.id)
                    self.reporter.warn(f"Lead ID {candidate.id} no longer exists; skipped.")
                    logger.warning("Lead ID %s disappeared before deactivation", candidate.id)
                    continue
                result.deactivated_count += 1
            except Exception as e:
                await db.rollback()
                result.failed_ids.append(candidate.id)
                self.reporter.error(f"Failed to deactivate lead ID {candidate.id}: {e}")
                logger.error(
                    "Failed to deactivate lead ID %s: %s",
                    candidate.id,
                    e,
                    extra={"audit_event": "lead_deactivation_failed", "lead_id": candidate.id, "error": str(e)},
                )
