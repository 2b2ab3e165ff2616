"""Shared pipeline components for the add-bookmark Cloud Function."""

from .errors import (
    BookmarkIngestError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    StoreLookupError,
    StoreError,
)

from .media_utils import (
    get_media_type,
    is_url_media,
)

from .scraper_utils import (
    REQUEST_TIMEOUT,
    MAX_BODY_BYTES,
    get_hostname,
    fetch_page,
    parse_metadata,
    scrape_metadata,
    fallback_metadata,
)

from .image_utils import (
    OG_IMAGE_PREFERRED_SITES,
    IFRAME_FRIENDLY_DOMAINS,
    is_og_image_preferred,
    can_embed_in_iframe,
    resolve_og_image,
    build_media_metadata,
    resolve_preview,
)

from .access_utils import (
    is_category_owner_or_collaborator,
    bookmark_exists,
)

from .store_utils import (
    MAIN_TABLE_NAME,
    CATEGORIES_TABLE_NAME,
    SHARED_CATEGORIES_TABLE_NAME,
    RecordStore,
)

__all__ = [
    # Errors
    'BookmarkIngestError',
    'ValidationError',
    'UnauthorizedError',
    'ForbiddenError',
    'ConflictError',
    'StoreLookupError',
    'StoreError',
    # Media classification
    'get_media_type',
    'is_url_media',
    # Scraping
    'REQUEST_TIMEOUT',
    'MAX_BODY_BYTES',
    'get_hostname',
    'fetch_page',
    'parse_metadata',
    'scrape_metadata',
    'fallback_metadata',
    # Preview image
    'OG_IMAGE_PREFERRED_SITES',
    'IFRAME_FRIENDLY_DOMAINS',
    'is_og_image_preferred',
    'can_embed_in_iframe',
    'resolve_og_image',
    'build_media_metadata',
    'resolve_preview',
    # Collection checks
    'is_category_owner_or_collaborator',
    'bookmark_exists',
    # Record store
    'MAIN_TABLE_NAME',
    'CATEGORIES_TABLE_NAME',
    'SHARED_CATEGORIES_TABLE_NAME',
    'RecordStore',
]
