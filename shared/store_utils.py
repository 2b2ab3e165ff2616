"""
Thin record-store client for Supabase's PostgREST and auth endpoints.

Talks plain HTTP through requests so the Cloud Function keeps a single
pooled session for both scraping and store traffic.

Table layout used by the pipeline:
- bookmarks_table   (url, title, description, ogImage, category_id,
                     user_id, meta_data, type, trash, inserted_at)
- categories        (id, user_id)
- shared_categories (category_id, email, edit_access)
"""

from typing import Optional

import requests

from .errors import StoreError, StoreLookupError, UnauthorizedError

MAIN_TABLE_NAME = 'bookmarks_table'
CATEGORIES_TABLE_NAME = 'categories'
SHARED_CATEGORIES_TABLE_NAME = 'shared_categories'

DEFAULT_STORE_TIMEOUT = 10


def _filter_value(value) -> str:
    """Render a Python value as a PostgREST eq. filter."""
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    if value is None:
        return 'is.null'
    return f"eq.{value}"


class RecordStore:
    """Query/insert access to the bookmark tables."""

    def __init__(self, base_url: str, api_key: str, session: requests.Session = None,
                 timeout: float = DEFAULT_STORE_TIMEOUT):
        if not base_url or not api_key:
            raise StoreError('Record store is not configured (SUPABASE_URL / SUPABASE_SERVICE_KEY)')

        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }
        if extra:
            headers.update(extra)
        return headers

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def select(self, table: str, columns: str, filters: dict) -> list:
        """
        Rows of `table` matching every equality filter.

        Raises:
            StoreLookupError: transport failure or error status
        """
        params = {'select': columns}
        for column, value in filters.items():
            params[column] = _filter_value(value)

        try:
            response = self.session.get(
                self._table_url(table),
                params=params,
                headers=self._headers(),
                timeout=self.timeout
            )
            response.raise_for_status()
            rows = response.json()
        except requests.exceptions.RequestException as e:
            raise StoreLookupError(f'Lookup on {table} failed: {str(e)}') from e
        except ValueError as e:
            raise StoreLookupError(f'Lookup on {table} returned invalid JSON') from e

        return rows if isinstance(rows, list) else [rows]

    def insert(self, table: str, row: dict) -> list:
        """
        Insert one row and return what the store wrote.

        Raises:
            StoreError: transport failure or error status
        """
        try:
            response = self.session.post(
                self._table_url(table),
                json=[row],
                headers=self._headers({'Prefer': 'return=representation'}),
                timeout=self.timeout
            )
            response.raise_for_status()
            rows = response.json()
        except requests.exceptions.RequestException as e:
            raise StoreError(f'Insert into {table} failed: {str(e)}') from e
        except ValueError as e:
            raise StoreError(f'Insert into {table} returned invalid JSON') from e

        if rows is None:
            return []
        return rows if isinstance(rows, list) else [rows]

    def get_user(self, access_token: str) -> dict:
        """
        Resolve an access token to the user it was issued for.

        Returns:
            {'id': ..., 'email': ...}

        Raises:
            UnauthorizedError: token missing, expired or rejected
            StoreLookupError: auth endpoint unreachable
        """
        if not access_token:
            raise UnauthorizedError('Missing access token')

        try:
            response = self.session.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    'apikey': self.api_key,
                    'Authorization': f'Bearer {access_token}',
                },
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise StoreLookupError(f'Auth lookup failed: {str(e)}') from e

        if response.status_code in (401, 403):
            raise UnauthorizedError('Invalid access token')
        if response.status_code >= 400:
            raise StoreLookupError(f'Auth lookup failed: HTTP {response.status_code}')

        try:
            data = response.json()
        except ValueError as e:
            raise StoreLookupError('Auth lookup returned invalid JSON') from e

        if not isinstance(data, dict) or not data.get('id'):
            raise UnauthorizedError('Invalid access token')

        return {'id': data['id'], 'email': data.get('email')}
