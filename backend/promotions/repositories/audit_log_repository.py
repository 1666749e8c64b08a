"""Repository for AuditLog writes and lookups."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from promotions.models.audit_log import AuditLog
from promotions.models.shared import generate_uuid


class AuditLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        action: str,
        resource: str,
        resource_id: str | None,
        changes: dict[str, Any],
        user_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog:
        audit_log = AuditLog(
            id=generate_uuid(),
            action=action,
            resource=resource,
            resource_id=resource_id,
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
            changes=changes,
        )
        self.db.add(audit_log)
        self.db.commit()
        self.db.refresh(audit_log)
        return audit_log

    def get_by_resource(self, resource: str, resource_id: str) -> list[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(AuditLog.resource == resource, AuditLog.resource_id == resource_id)
            .order_by(AuditLog.created_at.desc())
            .all()
        )
