from __future__ import annotations

import pytest

from mission_control import create_app
from mission_control.store import (
    QueryResult,
    StoreClient,
    StoreConfig,
    StoreError,
    CONFIG_MISSING,
    WRITE_FAILED,
)


class FakeStore(StoreClient):
    """In-memory stand-in for the REST store; records every query and write"""

    def __init__(self, tables=None, configured=True, fail_writes=False):
        config = StoreConfig(url="http://store.test", key="test-key") if configured else StoreConfig()
        super().__init__(config)
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.fail_writes = fail_writes
        self.queries = []
        self.writes = []
        self._next_id = 1000

    def fetch(self, query):
        self.queries.append(query)
        if not self.is_configured:
            return QueryResult(error=StoreError(CONFIG_MISSING, "Missing data store URL or key"))
        rows = list(self.tables.get(query.table, []))
        for column, expression in query.filters:
            op, _, value = expression.partition('.')
            if op == 'eq':
                rows = [r for r in rows if str(r.get(column)) == value]
            elif op == 'neq':
                rows = [r for r in rows if str(r.get(column)) != value]
        if query.row_limit is not None:
            rows = rows[:query.row_limit]
        return QueryResult(rows=rows)

    def _check_write(self, method, table, payload=None, row_id=None):
        self.writes.append((method, table, payload, row_id))
        if not self.is_configured:
            raise StoreError(CONFIG_MISSING, "Missing data store URL or key")
        if self.fail_writes:
            raise StoreError(WRITE_FAILED, "permission denied for table tasks", 401)

    def insert(self, table, payload):
        self._check_write("POST", table, payload)
        self._next_id += 1
        row = dict(payload, id=str(self._next_id), created_at="2026-10-17T12:00:00+00:00")
        self.tables.setdefault(table, []).insert(0, row)
        return row

    def update(self, table, row_id, payload):
        self._check_write("PATCH", table, payload, row_id)
        for row in self.tables.get(table, []):
            if str(row.get('id')) == str(row_id):
                row.update(payload)
                return dict(row)
        raise StoreError(WRITE_FAILED, "Failed to update tasks: no row returned")

    def delete(self, table, row_id):
        self._check_write("DELETE", table, row_id=row_id)
        self.tables[table] = [r for r in self.tables.get(table, []) if str(r.get('id')) != str(row_id)]


@pytest.fixture()
def store():
    return FakeStore()


@pytest.fixture()
def make_client():
    def _make(store, **config):
        app = create_app(config={'TESTING': True, 'SECRET_KEY': 'test', 'ALLOWED_EMAIL': None, **config},
                         store=store)
        return app.test_client()
    return _make
