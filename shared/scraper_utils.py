"""
Open Graph scraper for submitted bookmarks.

Fetches a page with a hard deadline and a capped body, then pulls the title,
description, preview image and favicon out of the document head.

Scraping is best-effort: every public function returns a (value, error)
tuple instead of raising, and the caller decides what to substitute.
"""

import socket
import threading
import time
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36'
REQUEST_TIMEOUT = 10  # seconds, connect + full body read
MAX_BODY_BYTES = 512 * 1024
CHUNK_SIZE = 16 * 1024

REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Encoding': 'gzip, deflate',
    'Connection': 'keep-alive',
}


def get_hostname(url: str) -> str:
    """Hostname of the URL, or the URL itself if it has none."""
    hostname = urlparse(url or '').hostname
    return hostname or url


def _clean_text(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty strings become None."""
    if not value:
        return None
    value = ' '.join(value.split())
    return value or None


def _absolute_url(page_url: str, value: Optional[str]) -> Optional[str]:
    value = (value or '').strip()
    if not value:
        return None
    return urljoin(page_url, value)


def _abort_response(response) -> None:
    """Shut the response's socket so a read blocked on it returns at once."""
    connection = getattr(response.raw, 'connection', None)
    sock = getattr(connection, 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass  # already closed by the peer


def _read_page(url: str, http, state: dict) -> None:
    """Worker body for fetch_page(); fills state['body'] or state['error']."""
    try:
        response = http.get(
            url,
            headers=REQUEST_HEADERS,
            timeout=REQUEST_TIMEOUT,
            stream=True,
            allow_redirects=True
        )
    except requests.exceptions.Timeout:
        state['error'] = 'Request timed out'
        return
    except requests.exceptions.RequestException as e:
        state['error'] = f'Request failed: {str(e)}'
        return

    state['response'] = response
    if state['cancelled'].is_set():
        response.close()
        return

    with response:
        try:
            response.raise_for_status()

            chunks = []
            size = 0
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if state['cancelled'].is_set():
                    return
                chunks.append(chunk)
                size += len(chunk)
                if size >= MAX_BODY_BYTES:
                    break

            state['body'] = b''.join(chunks)[:MAX_BODY_BYTES]

        except requests.exceptions.Timeout:
            state['error'] = 'Request timed out'
        except requests.exceptions.HTTPError as e:
            state['error'] = f'HTTP error: {e.response.status_code}'
        except Exception as e:
            # Includes reads cut short by _abort_response()
            state['error'] = f'Request failed: {str(e)}'


def fetch_page(url: str, session: requests.Session = None) -> Tuple[Optional[bytes], Optional[str]]:
    """
    Fetch at most MAX_BODY_BYTES of a page within REQUEST_TIMEOUT seconds.

    requests' timeout only bounds each socket read (and not DNS), so a
    server trickling bytes could hold a read open indefinitely. The read runs
    in a worker thread instead, and the caller waits for it no longer than
    REQUEST_TIMEOUT in total.

    Returns:
        (body, None) on success, (None, error_message) on failure.
        Bodies larger than the cap are truncated, not rejected.
    """
    http = session or requests
    state = {'body': None, 'error': None, 'response': None, 'cancelled': threading.Event()}

    worker = threading.Thread(target=_read_page, args=(url, http, state), daemon=True)
    worker.start()
    worker.join(REQUEST_TIMEOUT)

    if worker.is_alive():
        state['cancelled'].set()
        if state['response'] is not None:
            _abort_response(state['response'])
        return None, 'Request timed out'

    if state['error']:
        return None, state['error']
    return state['body'], None


def parse_metadata(url: str, html) -> dict:
    """
    Extract title, description, og:image and favicon from a document.

    Meta tags are walked once in document order and the first value of each
    property wins. og:description outranks name=description no matter which
    comes first, so the walk only stops early once all three og: properties
    are found.
    """
    metadata = {
        'title': None,
        'description': None,
        'ogImage': None,
        'favIcon': None,
    }

    soup = BeautifulSoup(html or '', 'html.parser')

    og_title = None
    og_description = None
    og_image = None
    meta_description = None

    for meta in soup.find_all('meta'):
        if og_title and og_description and og_image:
            break

        prop = (meta.get('property') or '').lower()
        name = (meta.get('name') or '').lower()
        content = meta.get('content')

        if prop == 'og:title' and not og_title:
            og_title = _clean_text(content)
        elif prop == 'og:description' and not og_description:
            og_description = _clean_text(content)
        elif prop == 'og:image' and not og_image:
            og_image = _absolute_url(url, content)
        elif name == 'description' and not meta_description:
            meta_description = _clean_text(content)

    title = og_title
    if not title and soup.title:
        title = _clean_text(soup.title.get_text())

    metadata['title'] = title or get_hostname(url)
    metadata['description'] = og_description or meta_description
    metadata['ogImage'] = og_image

    # rel is multi-valued, so ~= covers both "icon" and "shortcut icon"
    favicon = soup.select_one('link[rel~="icon"][href]')
    if favicon:
        metadata['favIcon'] = _absolute_url(url, favicon.get('href'))

    return metadata


def fallback_metadata(url: str) -> dict:
    """Metadata used when the page could not be scraped."""
    return {
        'title': get_hostname(url),
        'description': None,
        'ogImage': None,
        'favIcon': None,
    }


def scrape_metadata(url: str, session: requests.Session = None) -> Tuple[Optional[dict], Optional[str]]:
    """Fetch and parse a page. Returns (metadata, error)."""
    start = time.monotonic()
    try:
        html, error = fetch_page(url, session)
        if error:
            return None, error
        return parse_metadata(url, html), None
    finally:
        print(f"Scraping took: {time.monotonic() - start:.2f}s for URL: {url}")
