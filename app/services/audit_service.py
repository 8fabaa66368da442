"""Audit log service."""

import logging
from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


async def log_event(
    db: AsyncSession,
    event: str,
    details: Optional[Dict[str, Any]] = None,
    actor_id: Optional[int] = None,
) -> AuditLog:
    """Record an audit event in the logger and the audit_log table.

    Args:
        db: Database session
        event: Event name (e.g., "leads_deactivated", "lead_approved")
        details: JSON-serializable details about the event
        actor_id: ID of the acting user, or None for system jobs

    Returns:
        The created audit log entry
    """
    details = details or {}
    logger.info(
        "audit event=%s actor=%s details=%s",
        event,
        actor_id,
        details,
        extra={"audit_event": event, "audit_details": details},
    )

    audit_entry = AuditLog(event=event, actor_id=actor_id, details=details)
    db.add(audit_entry)
    await db.commit()
    await db.refresh(audit_entry)

    return audit_entry
