"""
Unit tests for media classification.
"""

import pytest

from shared.media_utils import get_media_type, is_url_media


class TestGetMediaType:
    """Tests for get_media_type()"""

    def test_pdf_is_document(self):
        assert get_media_type("https://example.com/a.pdf") == "document"

    def test_uppercase_pdf_is_document(self):
        assert get_media_type("https://example.com/REPORT.PDF") == "document"

    @pytest.mark.parametrize("url", [
        "https://example.com/clip.mp4",
        "https://example.com/clip.webm",
        "https://example.com/clip.avi",
    ])
    def test_video_extensions(self, url):
        assert get_media_type(url) == "video"

    @pytest.mark.parametrize("url", [
        "https://example.com/photo.jpg",
        "https://example.com/photo.jpeg",
        "https://example.com/photo.png",
        "https://example.com/photo.gif",
        "https://example.com/photo.webp",
    ])
    def test_image_extensions(self, url):
        assert get_media_type(url) == "image"

    def test_html_page_is_link(self):
        assert get_media_type("https://example.com/article") == "link"

    def test_tiff_is_link_type(self):
        # Direct asset, but not in the type table
        assert get_media_type("https://example.com/scan.tiff") == "link"

    def test_empty_url(self):
        assert get_media_type("") == "link"

    def test_query_string_ignored(self):
        assert get_media_type("https://cdn.example.com/photo.JPG?w=600") == "image"

    @pytest.mark.parametrize("url", [
        "https://www.avis.com/",
        "https://www.pdfdrive.com/",
        "https://example.com/how-to-use.mp4-files/guide",
        "https://example.com/search?q=report.pdf",
    ])
    def test_extension_outside_path_suffix_is_link(self, url):
        assert get_media_type(url) == "link"


class TestIsUrlMedia:
    """Tests for is_url_media()"""

    def test_pdf_is_media(self):
        assert is_url_media("https://example.com/a.pdf") is True

    def test_query_string_allowed(self):
        assert is_url_media("https://cdn.example.com/photo.PNG?w=600&h=400") is True

    @pytest.mark.parametrize("url", [
        "https://example.com/scan.tiff",
        "https://example.com/icon.bmp",
        "https://example.com/song.mp3",
    ])
    def test_extended_media_suffixes(self, url):
        assert is_url_media(url) is True

    @pytest.mark.parametrize("url", [
        "https://example.com/clip.webm",
        "https://example.com/clip.avi?t=30",
    ])
    def test_webm_and_avi_are_direct_media(self, url):
        assert is_url_media(url) is True

    def test_page_is_not_media(self):
        assert is_url_media("https://example.com/article") is False

    def test_extension_mid_path_is_not_media(self):
        assert is_url_media("https://example.com/file.pdf/view") is False

    def test_none_url(self):
        assert is_url_media(None) is False
