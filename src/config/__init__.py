"""
Configuration package for blogmark

Provides application and storage settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, storagesettings, AppSettings, StorageSettings

__all__ = ["appsettings", "storagesettings", "AppSettings", "StorageSettings"]
