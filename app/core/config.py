"""
Application configuration.
Values are read from environment variables / .env file via pydantic-settings.
Lead maintenance options are validated into an explicit LeadDeactivationConfig
which the deactivation job and the beat schedule receive as an argument.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from pydantic import field_validator
from pydantic_settings import BaseSettings

from app.models.enums import LeadStatus

logger = logging.getLogger(__name__)

DEACTIVATION_SCHEDULES = ("daily", "weekly", "monthly")


@dataclass(frozen=True)
class LeadDeactivationConfig:
    """Validated options for automatic lead deactivation."""
    after_days: int = 90
    statuses: Sequence[LeadStatus] = field(default_factory=tuple)
    schedule: str = "daily"

    def __post_init__(self):
        if isinstance(self.after_days, bool) or not isinstance(self.after_days, int) or self.after_days < 1:
            raise ValueError(
                f"Lead auto-deactivation threshold must be a positive integer, got {self.after_days!r}"
            )
        if self.schedule not in DEACTIVATION_SCHEDULES:
            raise ValueError(
                f"Lead auto-deactivation schedule must be one of: {', '.join(DEACTIVATION_SCHEDULES)} "
                f"(got {self.schedule!r})"
            )
        object.__setattr__(self, "statuses", tuple(_parse_status(s) for s in self.statuses))


def _parse_status(value) -> LeadStatus:
    try:
        return LeadStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in LeadStatus)
        raise ValueError(f"Unknown lead status {value!r}. Must be one of: {allowed}") from None


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATABASE_URL: str = "sqlite+aiosqlite:///./dealership_crm.db"
    JWT_SECRET_KEY: str = ""
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Celery (scheduled maintenance)
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_TIMEZONE: str = "UTC"

    # Lead auto-deactivation
    LEAD_AUTO_DEACTIVATE_DAYS: int = 90
    # Comma-separated, e.g. "not_converted,new". Empty means all statuses.
    LEAD_AUTO_DEACTIVATE_STATUSES: str = ""
    LEAD_AUTO_DEACTIVATE_SCHEDULE: str = "daily"

    class Config:
        env_file = ".env"

    @field_validator("LEAD_AUTO_DEACTIVATE_SCHEDULE", mode="before")
    @classmethod
    def _normalize_schedule(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def deactivation_statuses(self) -> List[str]:
        return [s.strip() for s in self.LEAD_AUTO_DEACTIVATE_STATUSES.split(",") if s.strip()]

    def lead_deactivation(self) -> LeadDeactivationConfig:
        """Build the validated deactivation config from these settings."""
        return LeadDeactivationConfig(
            after_days=self.LEAD_AUTO_DEACTIVATE_DAYS,
            statuses=tuple(self.deactivation_statuses()),
            schedule=self.LEAD_AUTO_DEACTIVATE_SCHEDULE,
        )


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. Export it as an environment variable or add it to .env. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
