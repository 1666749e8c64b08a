"""Tests for app wiring and core helpers."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import inspect

from promotions.core import database as db_module
from promotions.core.config import settings
from promotions.core.database import init_db, transaction
from promotions.core.results import ErrorCode, failure, success
from promotions.core.sorting import DiscountSort, apply_sort
from promotions.models.discount import Discount


class TestApp:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
        }

    def test_openapi_lists_discount_routes(self, client):
        schema = client.get("/openapi.json").json()
        assert schema["info"]["title"] == settings.APP_NAME
        assert "/v1/discounts/metrics" in schema["paths"]
        assert "/v1/discounts/{discount_id}/usage" in schema["paths"]

    def test_init_db_is_idempotent(self):
        init_db()
        tables = set(inspect(db_module.engine).get_table_names())
        assert {"discounts", "discount_products", "order_discounts", "audit_logs"} <= tables


class TestTransaction:
    def test_rolls_back_on_error(self, db_session):
        with pytest.raises(RuntimeError), transaction(db_session):
            db_session.add(Discount(name="x", type="percentage", value=5))
            db_session.flush()
            raise RuntimeError("boom")

        assert db_session.query(Discount).count() == 0

    def test_commits(self, db_session):
        with transaction(db_session):
            db_session.add(Discount(name="x", type="percentage", value=5))
        assert db_session.query(Discount).count() == 1


class TestResults:
    def test_success(self):
        result = success(3)
        assert result.success
        assert result.data == 3

    def test_failure(self):
        result = failure(ErrorCode.NOT_FOUND, "gone")
        assert not result.success
        assert result.data is None
        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.message == "gone"


class TestApplySort:
    def test_ties_are_broken_by_id(self, db_session, make_discount):
        moment = datetime.now(UTC) - timedelta(days=1)
        created = [make_discount(name=f"D{i}", created_at=moment) for i in range(3)]

        query = apply_sort(db_session.query(Discount), Discount, DiscountSort.CREATED_AT_ASC)
        assert [d.id for d in query.all()] == sorted((d.id for d in created), key=str)
