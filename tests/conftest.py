"""
Shared fixtures

Storage settings are always built explicitly so tests never depend on the
R2_* / CLOUDFLARE_* variables of the machine running them.
"""

import pytest

from blogmark.config.settings import StorageSettings


def storage_make(**overrides) -> StorageSettings:
    values = {
        "r2_public_url": None,
        "cloudflare_account_id": None,
        "r2_fallback_url": "https://files.tukurugi.uk",
        "r2_access_key_id": None,
        "r2_secret_access_key": None,
        "r2_bucket_name": "blog-files",
    }
    values.update(overrides)
    return StorageSettings(_env_file=None, **values)


@pytest.fixture
def storage() -> StorageSettings:
    """Public-URL tier configured"""
    return storage_make(r2_public_url="https://cdn.example.com")


@pytest.fixture
def storage_fallback() -> StorageSettings:
    """Nothing configured: fallback domain tier"""
    return storage_make()
