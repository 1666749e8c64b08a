"""Tests for the audit sink."""

import logging
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from promotions.core.auth import Actor
from promotions.models.audit_log import AuditLog
from promotions.repositories.audit_log_repository import AuditLogRepository
from promotions.services.audit_service import AuditService

ACTOR = Actor(
    user_id="admin-1",
    permissions=frozenset({"discounts.manage"}),
    ip_address="203.0.113.9",
    user_agent="pytest",
)


class TestAuditService:
    def test_record(self, db_session):
        resource_id = uuid4()
        AuditService(db_session).record(
            "update", "discount", resource_id, ACTOR, {"value": Decimal("12.50")}
        )

        [entry] = AuditLogRepository(db_session).get_by_resource("discount", str(resource_id))
        assert entry.action == "update"
        assert entry.user_id == "admin-1"
        assert entry.ip_address == "203.0.113.9"
        assert entry.user_agent == "pytest"
        assert entry.changes == {"value": 12.5}

    def test_record_without_changes(self, db_session):
        AuditService(db_session).record("delete", "discount", uuid4(), ACTOR)
        assert db_session.query(AuditLog).one().changes == {}

    def test_failures_are_logged_not_raised(self, db_session, caplog):
        service = AuditService(db_session)
        error = OperationalError("INSERT", {}, Exception("disk full"))
        with (
            patch.object(service.repo, "create", side_effect=error),
            caplog.at_level(logging.WARNING, logger="promotions.services.audit_service"),
        ):
            service.record("create", "discount", uuid4(), ACTOR, {"name": "x"})

        assert "Failed to record audit entry create" in caplog.text
        assert db_session.query(AuditLog).count() == 0
