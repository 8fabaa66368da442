"""Scheduled lead maintenance tasks."""

import asyncio
import logging
from typing import Optional

from app.core.celery_app import DEACTIVATE_OLD_LEADS_TASK, celery_app, deactivation_config
from app.core.config import LeadDeactivationConfig
from app.core.database import async_session, engine
from app.services.lead_deactivation import LeadDeactivationJob, LoggingReporter

logger = logging.getLogger(__name__)


async def run_scheduled_deactivation(
    config: LeadDeactivationConfig,
    days: Optional[int] = None,
    status: Optional[str] = None,
    session_factory=None,
) -> dict:
    """Run the deactivation job non-interactively (auto-confirmed, never dry-run).

    ``days`` and ``status`` come from the beat entry; ``days`` falls back to
    ``config.after_days``.
    """
    job = LeadDeactivationJob(config, session_factory or async_session, reporter=LoggingReporter(logger))
    result = await job.run(days=days, status=status, dry_run=False, interactive=False)
    return result.summary()


@celery_app.task(name=DEACTIVATE_OLD_LEADS_TASK)
def deactivate_old_leads(days: Optional[int] = None, status: Optional[str] = None) -> dict:
    async def _run():
        try:
            return await run_scheduled_deactivation(deactivation_config, days, status)
        finally:
            # Each task gets its own event loop; drop pooled connections bound to it
            await engine.dispose()

    return asyncio.run(_run())
