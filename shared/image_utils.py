"""
Preview image selection and embed hints for a bookmark.

Decides which image represents the bookmark, whether that image comes from a
source we trust as-is, and (only for untrusted sources) whether the page can
be shown in an iframe.
"""

from typing import Optional
from urllib.parse import urlparse

from .media_utils import get_media_type, is_url_media

# Hosts whose own og:image is good enough; no embed check needed
OG_IMAGE_PREFERRED_SITES = ['cosmos', 'pinterest', 'savee.it', 'are.na', 'medium', 'spotify', 'imdb']

# Static stand-in for real X-Frame-Options / CSP detection
IFRAME_FRIENDLY_DOMAINS = [
    'youtube.com', 'youtu.be', 'vimeo.com', 'codepen.io', 'jsfiddle.net',
    'codesandbox.io', 'repl.it', 'stackblitz.com',
]


def _url_host(url: str) -> str:
    return (urlparse(url or '').hostname or '').lower()


def is_og_image_preferred(url: str) -> bool:
    host = _url_host(url)
    return any(site in host for site in OG_IMAGE_PREFERRED_SITES)


def can_embed_in_iframe(url: str) -> bool:
    host = _url_host(url)
    return any(domain in host for domain in IFRAME_FRIENDLY_DOMAINS)


def resolve_og_image(url: str, scraped_image: Optional[str], is_media: bool) -> Optional[str]:
    """A direct media URL is its own preview; otherwise use what was scraped."""
    if is_media:
        return url
    return scraped_image


def build_media_metadata(url: str, scraped: dict) -> dict:
    """
    Build the meta_data column for a new bookmark.

    Keys that later pipelines fill in (screenshot, blur hash, OCR, ...) are
    written as None so every row has the same shape.

    Args:
        url: The submitted URL
        scraped: Scraper output (or its fallback)

    Returns:
        dict ready to store in meta_data
    """
    preferred = is_og_image_preferred(url)

    iframe_allowed = None
    if not preferred:
        iframe_allowed = can_embed_in_iframe(url)

    return {
        'coverImage': None,
        'favIcon': scraped.get('favIcon'),
        'height': None,
        'iframeAllowed': iframe_allowed,
        'img_caption': None,
        'isOgImagePreferred': preferred,
        'isPageScreenshot': None,
        'mediaType': get_media_type(url),
        'ocr': None,
        'ogImgBlurUrl': None,
        'screenshot': None,
        'twitter_avatar_url': None,
        'width': None,
    }


def resolve_preview(url: str, scraped: dict) -> dict:
    """Pick the og:image for the record and build its media metadata."""
    return {
        'ogImage': resolve_og_image(url, scraped.get('ogImage'), is_url_media(url)),
        'meta_data': build_media_metadata(url, scraped),
    }
