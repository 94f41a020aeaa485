import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


CONFIG_MISSING = "config_missing"
QUERY_FAILED = "query_failed"
WRITE_FAILED = "write_failed"


class StoreError(Exception):
    """Failure talking to the data store"""

    def __init__(self, kind: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"StoreError(kind={self.kind!r}, message={self.message!r}, status_code={self.status_code!r})"


@dataclass
class StoreConfig:
    url: Optional[str] = None
    key: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.url) and bool(self.key)

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        url = env.get('SUPABASE_URL') or env.get('NEXT_PUBLIC_SUPABASE_URL')
        # The service role key bypasses row level security; the anon key is the fallback
        key = (env.get('SUPABASE_SERVICE_ROLE_KEY')
               or env.get('SUPABASE_ANON_KEY')
               or env.get('NEXT_PUBLIC_SUPABASE_ANON_KEY'))
        return cls(url=url.rstrip('/') if url else None, key=key)


@dataclass
class QueryResult:
    rows: List[dict] = field(default_factory=list)
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Query:
    """Chainable read query against one table, encoded in PostgREST syntax"""

    def __init__(self, client, table: str):
        self.client = client
        self.table = table
        self.columns = '*'
        self.filters = []
        self.ordering = []
        self.row_limit = None

    def select(self, columns: str = '*'):
        self.columns = columns
        return self

    def _filter(self, column, op, value):
        self.filters.append((column, f"{op}.{value}"))
        return self

    def eq(self, column, value):
        return self._filter(column, 'eq', value)

    def neq(self, column, value):
        return self._filter(column, 'neq', value)

    def gte(self, column, value):
        return self._filter(column, 'gte', value)

    def lte(self, column, value):
        return self._filter(column, 'lte', value)

    def order(self, column, ascending: bool = True, nulls_first: Optional[bool] = None):
        term = f"{column}.{'asc' if ascending else 'desc'}"
        if nulls_first is not None:
            term += '.nullsfirst' if nulls_first else '.nullslast'
        self.ordering.append(term)
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def params(self):
        params = [('select', self.columns)]
        params.extend(self.filters)
        if self.ordering:
            params.append(('order', ','.join(self.ordering)))
        if self.row_limit is not None:
            params.append(('limit', str(self.row_limit)))
        return params

    def execute(self) -> QueryResult:
        return self.client.fetch(self)


class StoreClient:
    """
    Thin REST client for the external data store.

    Reads never raise: they hand back a QueryResult carrying the rows or the error.
    Writes raise StoreError so the caller decides what "nothing changed" looks like.
    """

    def __init__(self, config: StoreConfig, session: Optional[requests.Session] = None, timeout: float = 10):
        self.config = config
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def table(self, name: str) -> Query:
        return Query(self, name)

    def _endpoint(self, table):
        return f"{self.config.url}/rest/v1/{table}"

    def _headers(self, write=False):
        headers = {
            "apikey": self.config.key,
            "Authorization": f"Bearer {self.config.key}",
        }
        if write:
            headers["Content-Type"] = "application/json"
            headers["Prefer"] = "return=representation"
        return headers

    @staticmethod
    def _error_message(response, default):
        try:
            data = response.json()
        except ValueError:
            return default
        if isinstance(data, dict) and isinstance(data.get('message'), str):
            return data['message']
        return default

    def fetch(self, query: Query) -> QueryResult:
        if not self.is_configured:
            return QueryResult(error=StoreError(CONFIG_MISSING, "Missing data store URL or key"))

        try:
            response = self.session.request(
                "GET",
                self._endpoint(query.table),
                params=query.params(),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            error = StoreError(QUERY_FAILED, f"Request to {query.table} failed: {e}")
            logger.error(f"Store error: {error.message}")
            return QueryResult(error=error)

        if not response.ok:
            message = self._error_message(response, f"Query on {query.table} failed")
            error = StoreError(QUERY_FAILED, message, response.status_code)
            logger.error(f"Store error ({response.status_code}): {message}")
            return QueryResult(error=error)

        try:
            data = response.json()
        except ValueError:
            error = StoreError(QUERY_FAILED, f"Invalid JSON from {query.table}", response.status_code)
            logger.error(f"Store error: {error.message}")
            return QueryResult(error=error)

        if not isinstance(data, list):
            data = [data] if isinstance(data, dict) else []
        return QueryResult(rows=data)

    def _write(self, method, table, payload=None, row_id=None, default_message="Write failed"):
        if not self.is_configured:
            raise StoreError(CONFIG_MISSING, "Missing data store URL or key")

        params = {'id': f"eq.{row_id}"} if row_id is not None else None
        try:
            response = self.session.request(
                method,
                self._endpoint(table),
                params=params,
                json=payload,
                headers=self._headers(write=payload is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(WRITE_FAILED, f"{default_message}: {e}") from e

        if not response.ok:
            raise StoreError(WRITE_FAILED, self._error_message(response, default_message), response.status_code)
        return response

    def _returned_row(self, response, default_message):
        try:
            data = response.json()
        except ValueError:
            raise StoreError(WRITE_FAILED, f"{default_message}: invalid JSON", response.status_code)
        row = data[0] if isinstance(data, list) and data else data
        if not isinstance(row, dict):
            raise StoreError(WRITE_FAILED, f"{default_message}: no row returned", response.status_code)
        return row

    def insert(self, table: str, payload: dict) -> dict:
        response = self._write("POST", table, payload=payload, default_message=f"Failed to insert into {table}")
        return self._returned_row(response, f"Failed to insert into {table}")

    def update(self, table: str, row_id, payload: dict) -> dict:
        response = self._write("PATCH", table, payload=payload, row_id=row_id,
                               default_message=f"Failed to update {table}")
        return self._returned_row(response, f"Failed to update {table}")

    def delete(self, table: str, row_id) -> None:
        self._write("DELETE", table, row_id=row_id, default_message=f"Failed to delete from {table}")
