"""
Shared pytest fixtures for the add-bookmark tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

from shared.errors import StoreError, StoreLookupError, UnauthorizedError

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Directory name has a hyphen, so it can't be imported normally
_add_bookmark_module = _load_module_from_path(
    'add_bookmark_main',
    PROJECT_ROOT / 'add-bookmark' / 'main.py'
)


class FakeStore:
    """In-memory stand-in for RecordStore with the same select/insert contract."""

    def __init__(self, tables=None, user=None, fail_lookups=False,
                 fail_insert=False, return_rows=True):
        self.tables = tables or {}
        self.user = user or {'id': 'user-1', 'email': 'owner@example.com'}
        self.fail_lookups = fail_lookups
        self.fail_insert = fail_insert
        self.return_rows = return_rows
        self.selects = []
        self.inserted = []

    def select(self, table, columns, filters):
        self.selects.append((table, dict(filters)))
        if self.fail_lookups:
            raise StoreLookupError(f'Lookup on {table} failed: connection refused')
        return [
            row for row in self.tables.get(table, [])
            if all(row.get(key) == value for key, value in filters.items())
        ]

    def insert(self, table, row):
        if self.fail_insert:
            raise StoreError(f'Insert into {table} failed: HTTP 500')
        self.inserted.append((table, row))
        if not self.return_rows:
            return []
        stored = dict(row, id=len(self.inserted), inserted_at='2024-12-15T10:00:00+00:00')
        self.tables.setdefault(table, []).append(stored)
        return [stored]

    def get_user(self, access_token):
        if not access_token:
            raise UnauthorizedError('Missing access token')
        return self.user


# ============================================================================
# Cloud Function Fixtures
# ============================================================================

@pytest.fixture
def add_bookmark_module():
    """The loaded add-bookmark main module (for patching)."""
    return _add_bookmark_module


@pytest.fixture
def parse_category_id():
    """Returns parse_category_id function from add-bookmark."""
    return _add_bookmark_module.parse_category_id


@pytest.fixture
def validate_payload():
    """Returns validate_payload function from add-bookmark."""
    return _add_bookmark_module.validate_payload


@pytest.fixture
def build_bookmark_record():
    """Returns build_bookmark_record function from add-bookmark."""
    return _add_bookmark_module.build_bookmark_record


@pytest.fixture
def add_bookmark():
    """Returns the admission pipeline from add-bookmark."""
    return _add_bookmark_module.add_bookmark


@pytest.fixture
def add_bookmark_min_data():
    """Returns main entry point from add-bookmark."""
    return _add_bookmark_module.add_bookmark_min_data


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def fake_store_factory():
    """Factory for FakeStore instances."""
    return FakeStore


@pytest.fixture
def fake_store():
    """Store where user-1 owns category 12 and edits category 34 as collaborator."""
    return FakeStore(tables={
        'categories': [
            {'id': 12, 'user_id': 'user-1'},
            {'id': 34, 'user_id': 'user-2'},
            {'id': 56, 'user_id': 'user-2'},
        ],
        'shared_categories': [
            {'id': 1, 'category_id': 34, 'email': 'owner@example.com', 'edit_access': True},
            {'id': 2, 'category_id': 56, 'email': 'owner@example.com', 'edit_access': False},
        ],
        'bookmarks_table': [
            {'id': 100, 'url': 'https://example.com/already', 'category_id': 12, 'trash': False},
            {'id': 101, 'url': 'https://example.com/trashed', 'category_id': 12, 'trash': True},
        ],
    })


@pytest.fixture
def user():
    return {'id': 'user-1', 'email': 'owner@example.com'}


# ============================================================================
# HTML Fixtures
# ============================================================================

@pytest.fixture
def sample_article_html():
    """Raw HTML of a sample article page with full Open Graph tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>10 Python Tips | Example Blog</title>
        <meta name="description" content="Learn essential Python tips">
        <meta property="og:title" content="10 Python Tips You Should Know">
        <meta property="og:description" content="The tips every Python developer needs">
        <meta property="og:image" content="https://example.com/image.jpg">
        <link rel="icon" href="/favicon.ico">
    </head>
    <body>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <p>Here are some tips for Python development.</p>
        </article>
    </body>
    </html>
    """


@pytest.fixture
def sample_plain_html():
    """Raw HTML of a page with no Open Graph tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>  Plain Page
        </title>
        <meta name="description" content="Just a plain page">
        <link rel="shortcut icon" href="https://cdn.example.com/icon.png">
    </head>
    <body><p>Nothing fancy.</p></body>
    </html>
    """


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest
