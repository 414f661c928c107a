"""
Shared pytest fixtures for the quote service test suite.

The app talks to Supabase and Resend through injected dependencies; tests
swap both for in-memory fakes via app.dependency_overrides.
"""
import os
import tempfile
import uuid

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="wrapcommand-logs-"))

import pytest
from starlette.testclient import TestClient

from wrapcommand.core.dependencies import get_resend_mailer, get_supabase
from wrapcommand.core.errors import EmailDeliveryError
from wrapcommand.main import app


def _column_value(row, column):
    if "->>" in column:
        parent, child = column.split("->>", 1)
        value = (row.get(parent) or {}).get(child)
        return None if value is None else str(value)
    return row.get(column)


class FakeSupabaseClient:
    """In-memory stand-in for SupabaseClient. Set fail_on[(method, table)] to inject errors."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = {}

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def _check(self, method, table):
        self.calls.append((method, table))
        error = self.fail_on.get((method, table))
        if error is not None:
            raise error

    def _matches(self, row, match):
        return all(_column_value(row, col) == (str(v) if "->>" in col else v) for col, v in match.items())

    async def insert(self, table, row):
        self._check("insert", table)
        stored = {"id": str(uuid.uuid4()), **row}
        self.rows(table).append(stored)
        return dict(stored)

    async def insert_many(self, table, rows):
        self._check("insert_many", table)
        for row in rows:
            self.rows(table).append({"id": str(uuid.uuid4()), **row})
        return len(rows)

    async def update(self, table, match, values):
        self._check("update", table)
        updated = []
        for row in self.rows(table):
            if self._matches(row, match):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def select_one(self, table, match):
        self._check("select_one", table)
        for row in self.rows(table):
            if self._matches(row, match):
                return dict(row)
        return None

    async def delete_all(self, table):
        self._check("delete_all", table)
        self.tables[table] = []

    def mutations(self):
        return [c for c in self.calls if c[0] != "select_one"]

    def events(self, event_type=None):
        events = self.rows("conversation_events")
        if event_type is None:
            return events
        return [e for e in events if e["event_type"] == event_type]


class FakeMailer:
    def __init__(self, configured=True, fail=False):
        self.configured = configured
        self.fail = fail
        self.sent = []

    @property
    def is_configured(self):
        return self.configured

    async def send(self, to, subject, html):
        if isinstance(self.fail, BaseException):
            raise self.fail
        if self.fail:
            raise EmailDeliveryError("Mail provider returned 500: upstream unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"msg-{len(self.sent)}"


@pytest.fixture
def fake_db():
    return FakeSupabaseClient()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(fake_db, mailer):
    """TestClient with lifespan state loaded and external services faked."""
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_resend_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seed_draft(fake_db):
    """Insert an open quote draft and return its row."""

    def _seed(**overrides):
        row = {
            "id": str(uuid.uuid4()),
            "organization_id": "org-1",
            "source_agent": "hello_email",
            "confidence": 0.9,
            "customer_name": "Dana Fleet",
            "customer_email": "dana@example.com",
            "vehicle_year": 2020,
            "vehicle_make": "Ford",
            "vehicle_model": "Transit",
            "material": "Avery MPI 1105 with DOL 1460Z Lamination",
            "sqft": 350.0,
            "price_per_sqft": 5.27,
            "total_price": 1844.5,
            "needs_review": False,
            "status": "draft",
            "source": "agent",
            "original_message": "Need a quote for our Transit",
            "conversation_id": "conv-123",
        }
        row.update(overrides)
        fake_db.rows("quote_drafts").append(row)
        return row

    return _seed
