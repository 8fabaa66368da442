"""Celery application and beat schedule for periodic maintenance."""
import logging
from typing import Any, Dict

from celery import Celery
from celery.schedules import crontab

from app.core.config import LeadDeactivationConfig, settings

logger = logging.getLogger(__name__)

DEACTIVATE_OLD_LEADS_TASK = "leads.deactivate_old"

# Off-peak times; per-status runs follow the unfiltered run
UNFILTERED_RUN_AT = (2, 0)
PER_STATUS_RUN_AT = (2, 30)


def _cadence(schedule: str, hour: int, minute: int) -> crontab:
    if schedule == "weekly":
        return crontab(hour=hour, minute=minute, day_of_week=0)
    if schedule == "monthly":
        return crontab(hour=hour, minute=minute, day_of_month=1)
    return crontab(hour=hour, minute=minute)


def build_deactivation_schedule(config: LeadDeactivationConfig) -> Dict[str, Dict[str, Any]]:
    """Beat entries for lead deactivation.

    One unfiltered run at 02:00, plus one run per configured status at 02:30.
    The unfiltered run is always scheduled, so configured statuses are
    processed twice.
    """
    entries = {
        "deactivate-old-leads": {
            "task": DEACTIVATE_OLD_LEADS_TASK,
            "schedule": _cadence(config.schedule, *UNFILTERED_RUN_AT),
            "kwargs": {"days": config.after_days},
        }
    }

    for status in config.statuses:
        entries[f"deactivate-old-leads-{status.value}"] = {
            "task": DEACTIVATE_OLD_LEADS_TASK,
            "schedule": _cadence(config.schedule, *PER_STATUS_RUN_AT),
            "kwargs": {"days": config.after_days, "status": status.value},
        }

    return entries


def create_celery_app(config: LeadDeactivationConfig) -> Celery:
    app = Celery("dealership_crm", broker=settings.CELERY_BROKER_URL, include=["app.tasks.lead_maintenance"])
    app.conf.timezone = settings.CELERY_TIMEZONE
    app.conf.beat_schedule = build_deactivation_schedule(config)
    logger.info(
        "Scheduled lead deactivation: %s, %d day threshold, statuses=%s",
        config.schedule,
        config.after_days,
        [s.value for s in config.statuses] or "all",
    )
    return app


# Built once; the beat schedule and the scheduled task share this config
deactivation_config = settings.lead_deactivation()
celery_app = create_celery_app(deactivation_config)
