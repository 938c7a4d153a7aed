"""
Storage URL construction

Pure helper shared by the directive resolver (download/audio widgets) and
the storage service (public URL of an uploaded object). No network calls,
no existence checks: the URL may point at an object that does not exist.
"""

import re
from typing import Optional

from ..config.settings import StorageSettings

# A value "is already a URL" when it starts with a scheme (http://, s3://, ...)
URL_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')
# Any scheme-qualified reference (data:, blob:, mailto:, https:)
SCHEME_PREFIX = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')


def url_isAbsolute(value: Optional[str]) -> bool:
    """True when value starts with a URL scheme"""
    return bool(value) and URL_SCHEME.match(value) is not None


def url_hasScheme(value: Optional[str]) -> bool:
    """True when value carries any scheme prefix, with or without '//'"""
    return bool(value) and SCHEME_PREFIX.match(value) is not None


def storageUrl_construct(filename: str, category: str, config: StorageSettings) -> str:
    """
    Build the public URL for an object in a storage category.

    Resolution tiers, first configured wins:
        1. config.r2_public_url           -> {public}/{category}/{filename}
        2. config.cloudflare_account_id   -> https://pub-{id}.r2.dev/{category}/{filename}
        3. config.r2_fallback_url         -> {fallback}/{category}/{filename}

    Args:
        filename: Object name within the category (e.g., "sample.pdf")
        category: Storage namespace ("downloads", "audio", "images", ...)
        config: Storage settings carrying the three tiers

    Returns:
        Public URL string

    Example:
        >>> cfg = StorageSettings(r2_public_url="https://cdn.example.com")
        >>> storageUrl_construct("a.mp3", "audio", cfg)
        'https://cdn.example.com/audio/a.mp3'
    """
    if config.r2_public_url:
        base = config.r2_public_url.rstrip('/')
    elif config.cloudflare_account_id:
        base = f"https://pub-{config.cloudflare_account_id}.r2.dev"
    else:
        base = config.r2_fallback_url.rstrip('/')
    return f"{base}/{category}/{filename}"
