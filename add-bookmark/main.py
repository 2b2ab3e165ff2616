"""
Add Bookmark Cloud Function

Admits a submitted URL into a user's bookmarks with minimal scraped data.

Responsibilities:
- Validate the submission and normalize the collection id
- Resolve the submitting user from the access token
- Check collection ownership/collaboration and duplicates
- Scrape Open Graph metadata (hostname title if the page can't be fetched)
- Classify media type and pick the preview image
- Insert the bookmark row and return it

Does NOT:
- Render JavaScript, take screenshots or download images
- Edit or trash existing bookmarks
- Retry failed store calls
"""

import functions_framework
import requests
from requests.adapters import HTTPAdapter
from http.cookiejar import DefaultCookiePolicy
from urllib.parse import urlparse
import json
import math
import os
import re
import sys
import threading
import traceback

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.errors import (
    BookmarkIngestError,
    ValidationError,
    ForbiddenError,
    ConflictError,
    StoreError,
)
from shared.access_utils import is_category_owner_or_collaborator, bookmark_exists
from shared.image_utils import resolve_preview
from shared.scraper_utils import scrape_metadata, fallback_metadata
from shared.store_utils import RecordStore, MAIN_TABLE_NAME

# Configuration
SUPABASE_URL = os.environ.get('SUPABASE_URL')
SUPABASE_SERVICE_KEY = os.environ.get('SUPABASE_SERVICE_KEY')
STORE_TIMEOUT = float(os.environ.get('STORE_TIMEOUT', '10'))

BOOKMARK_TYPE = 'bookmark'
CATEGORY_ID_PATTERN = re.compile(r'-?\d+')

# Process-wide clients, built on first use
_clients = {'session': None, 'store': None}
_clients_lock = threading.Lock()


def get_http_session() -> requests.Session:
    """Pooled session for outbound scraping. Cookies are never kept."""
    if _clients['session'] is None:
        with _clients_lock:
            if _clients['session'] is None:
                session = requests.Session()
                adapter = HTTPAdapter(pool_connections=20, pool_maxsize=50)
                session.mount('http://', adapter)
                session.mount('https://', adapter)
                session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
                _clients['session'] = session
    return _clients['session']


def get_record_store() -> RecordStore:
    """Record store client for the configured Supabase project."""
    if _clients['store'] is None:
        with _clients_lock:
            if _clients['store'] is None:
                _clients['store'] = RecordStore(
                    SUPABASE_URL,
                    SUPABASE_SERVICE_KEY,
                    timeout=STORE_TIMEOUT
                )
    return _clients['store']


def parse_category_id(value):
    """
    Normalize the incoming category_id to an int, or None for uncategorized.

    Accepts None, "null", numeric strings, ints and floats (truncated).
    Zero in any shape means uncategorized.

    Raises:
        ValidationError: for anything else
    """
    if value is None:
        return None

    # bool is an int subclass; true/false is not an id
    if isinstance(value, bool):
        raise ValidationError('Invalid category ID')

    if isinstance(value, int):
        category_id = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError('Invalid category ID')
        category_id = int(value)
    elif isinstance(value, str):
        if value == 'null':
            return None
        if not CATEGORY_ID_PATTERN.fullmatch(value):
            raise ValidationError('Invalid category ID')
        category_id = int(value)
    else:
        raise ValidationError('Invalid category ID')

    return category_id or None


def validate_payload(payload) -> dict:
    """
    Validate a submission before any lookup or network call.

    Returns:
        {'url': str, 'category_id': int | None}
    """
    if not isinstance(payload, dict):
        raise ValidationError('Invalid JSON payload')

    # Write access gates everything else
    if payload.get('update_access') is not True:
        raise ForbiddenError('User does not have update access')

    url = payload.get('url')
    if not isinstance(url, str) or not url.strip():
        raise ValidationError('URL is required')
    url = url.strip()

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        raise ValidationError('Invalid URL')

    if parsed.scheme not in ('http', 'https') or not hostname:
        raise ValidationError('Invalid URL')

    return {
        'url': url,
        'category_id': parse_category_id(payload.get('category_id')),
    }


def build_bookmark_record(url: str, category_id, user_id: str, scraped: dict) -> dict:
    """Assemble the bookmarks_table row for a new bookmark."""
    preview = resolve_preview(url, scraped)

    return {
        'url': url,
        'title': scraped.get('title'),
        'user_id': user_id,
        'description': scraped.get('description'),
        'ogImage': preview['ogImage'],
        'category_id': category_id,
        'meta_data': preview['meta_data'],
        'type': BOOKMARK_TYPE,
        'trash': False,
    }


def add_bookmark(submission: dict, user: dict, store, session: requests.Session = None) -> list:
    """
    Run the admission pipeline for a validated submission.

    Uncategorized submissions skip the ownership and duplicate checks.

    Args:
        submission: Output of validate_payload()
        user: {'id', 'email'} of the submitting user
        store: RecordStore used for lookups and the insert
        session: Session used for scraping

    Returns:
        Inserted rows as returned by the store
    """
    url = submission['url']
    category_id = submission['category_id']

    if category_id is not None:
        if not is_category_owner_or_collaborator(store, category_id, user['id'], user.get('email')):
            raise ForbiddenError('User is neither owner or collaborator for the collection')

        if bookmark_exists(store, url, category_id):
            raise ConflictError('Bookmark already present in this category')

    scraped, scrape_error = scrape_metadata(url, session)
    if scrape_error:
        print(f"Scrape failed for {url}, falling back to hostname: {scrape_error}")
        scraped = fallback_metadata(url)

    record = build_bookmark_record(url, category_id, user['id'], scraped)

    rows = store.insert(MAIN_TABLE_NAME, record)
    if not rows:
        raise StoreError('No data returned after insert')

    return rows


def _error_response(error: dict, status_code: int, headers: dict):
    return (json.dumps({'data': None, 'error': error, 'message': None}), status_code, headers)


@functions_framework.http
def add_bookmark_min_data(request):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "url": "https://example.com/article",
        "category_id": 12,
        "update_access": true,
        "access_token": "<user JWT>"
    }
    """
    # Handle CORS
    if request.method == 'OPTIONS':
        headers = {
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Methods': 'POST, OPTIONS',
            'Access-Control-Allow-Headers': 'Content-Type, Authorization',
            'Access-Control-Max-Age': '3600'
        }
        return ('', 204, headers)

    headers = {
        'Access-Control-Allow-Origin': '*',
        'Content-Type': 'application/json',
    }

    if request.method != 'POST':
        return _error_response({
            'stage': 'validation',
            'message': 'Method not allowed',
            'recoverable': False
        }, 405, headers)

    try:
        payload = request.get_json(silent=True)
        submission = validate_payload(payload)

        store = get_record_store()
        user = store.get_user(payload.get('access_token'))

        rows = add_bookmark(submission, user, store, get_http_session())

        return (json.dumps({'data': rows, 'error': None, 'message': None}), 200, headers)

    except BookmarkIngestError as e:
        print(f"Rejected ({e.status_code}) at {e.stage}: {e.message}")
        return _error_response(e.to_dict(), e.status_code, headers)

    except Exception as e:
        print(f"Error: {str(e)}\n{traceback.format_exc()}")
        return _error_response({
            'stage': 'processing',
            'message': str(e),
            'recoverable': False
        }, 500, headers)
