"""
Storage URL construction tests

Exactly three tiers: public URL, account id, fallback domain.
"""

import pytest

from blogmark.lib.urls import storageUrl_construct, url_hasScheme, url_isAbsolute

from conftest import storage_make


class TestStorageUrl:
    """Test storageUrl_construct()"""

    def test_public_url_tier(self):
        config = storage_make(r2_public_url="https://cdn.example.com", cloudflare_account_id="abc")
        assert storageUrl_construct("a.pdf", "downloads", config) == "https://cdn.example.com/downloads/a.pdf"

    def test_public_url_trailing_slash(self):
        config = storage_make(r2_public_url="https://cdn.example.com/")
        assert storageUrl_construct("a.mp3", "audio", config) == "https://cdn.example.com/audio/a.mp3"

    def test_account_id_tier(self):
        config = storage_make(cloudflare_account_id="abc")
        assert storageUrl_construct("a.mp3", "audio", config) == "https://pub-abc.r2.dev/audio/a.mp3"

    def test_fallback_tier(self, storage_fallback):
        assert storageUrl_construct("a.mp3", "audio", storage_fallback) == "https://files.tukurugi.uk/audio/a.mp3"

    def test_custom_fallback(self):
        config = storage_make(r2_fallback_url="https://files.example.org/")
        assert storageUrl_construct("x", "images", config) == "https://files.example.org/images/x"

    def test_empty_public_url_falls_through(self):
        config = storage_make(r2_public_url="", cloudflare_account_id="abc")
        assert storageUrl_construct("x", "audio", config).startswith("https://pub-abc.r2.dev/")


class TestUrlIsAbsolute:
    """Test url_isAbsolute()"""

    @pytest.mark.parametrize("value,expected", [
        ("https://a.org/x", True),
        ("http://a.org/x", True),
        ("s3://bucket/key", True),
        ("/downloads/a.pdf", False),
        ("a.pdf", False),
        ("mailto:me@example.com", False),
        ("", False),
        (None, False),
    ])
    def test_absolute(self, value, expected):
        assert url_isAbsolute(value) is expected


class TestUrlHasScheme:
    """Test url_hasScheme()"""

    @pytest.mark.parametrize("value,expected", [
        ("https://a.org/x", True),
        ("data:image/png;base64,iVBORw0KGgo=", True),
        ("blob:abc", True),
        ("mailto:me@example.com", True),
        ("httpd-diagram.png", False),
        ("./a.png", False),
        ("", False),
        (None, False),
    ])
    def test_scheme(self, value, expected):
        assert url_hasScheme(value) is expected
