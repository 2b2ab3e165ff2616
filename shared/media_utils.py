"""
Media classification for submitted URLs.

Pure suffix inspection, no network access.
"""

import re
from urllib.parse import urlparse

MEDIA_TYPE_DOCUMENT = 'document'
MEDIA_TYPE_VIDEO = 'video'
MEDIA_TYPE_IMAGE = 'image'
MEDIA_TYPE_LINK = 'link'

DOCUMENT_EXTENSIONS = ('.pdf',)
VIDEO_EXTENSIONS = ('.mp4', '.webm', '.avi')
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp')

# Every typed extension plus tiff/bmp/mp3, which count as direct assets
# even though they classify as link
MEDIA_URL_PATTERN = re.compile(r'\.(jpg|jpeg|gif|png|tiff|bmp|webp|mp3|mp4|webm|avi|pdf)(\?.*)?$')


def _url_path(url: str) -> str:
    try:
        return urlparse(url or '').path.lower()
    except ValueError:
        return ''


def get_media_type(url: str) -> str:
    """Map a URL to one of image, video, document or link by its path suffix."""
    path = _url_path(url)

    if path.endswith(DOCUMENT_EXTENSIONS):
        return MEDIA_TYPE_DOCUMENT
    if path.endswith(VIDEO_EXTENSIONS):
        return MEDIA_TYPE_VIDEO
    if path.endswith(IMAGE_EXTENSIONS):
        return MEDIA_TYPE_IMAGE
    return MEDIA_TYPE_LINK


def is_url_media(url: str) -> bool:
    """Check if the URL points straight at a media file rather than a page."""
    return bool(MEDIA_URL_PATTERN.search((url or '').lower()))
