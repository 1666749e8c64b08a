"""Audit service for recording admin changes to discounts."""

import logging
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promotions.core.auth import Actor
from promotions.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Write-only audit trail. Failures are logged and never raised."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AuditLogRepository(db)

    def record(
        self,
        action: str,
        resource: str,
        resource_id: Any,
        actor: Actor,
        changes: dict[str, Any] | None = None,
    ) -> None:
        try:
            self.repo.create(
                action=action,
                resource=resource,
                resource_id=str(resource_id) if resource_id is not None else None,
                changes=jsonable_encoder(changes or {}),
                user_id=actor.user_id,
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "Failed to record audit entry %s on %s %s",
                action,
                resource,
                resource_id,
                exc_info=True,
            )
