"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.

Two settings groups are defined:
    - AppSettings: build/render behaviour, BLOGMARK_ prefix
      (e.g., BLOGMARK_STRICT_MODE=true)
    - StorageSettings: object-storage (Cloudflare R2) configuration, read
      from the same variable names the site deployment already uses
      (R2_PUBLIC_URL, CLOUDFLARE_ACCOUNT_ID, R2_BUCKET_NAME, ...)

Settings can also be loaded from a .env file in the project root.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use BLOGMARK_ prefix.

    Examples:
        BLOGMARK_STRICT_MODE=true
        BLOGMARK_PYGMENTS_STYLE=friendly
        BLOGMARK_INCLUDE_DRAFTS=true
    """

    model_config = SettingsConfigDict(
        env_prefix="BLOGMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Parser configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unclosed fences and directives raise SyntaxError",
    )

    # Compilation configuration
    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during compilation",
    )

    include_drafts: bool = Field(
        default=False,
        description="Compile documents whose front-matter sets draft: true",
    )

    content_collections: List[str] = Field(
        default=["blog", "news", "events"],
        description="Collection directories scanned under the content root",
    )

    # Rendering configuration
    pygments_style: str = Field(
        default="monokai",
        description="Pygments style used for fenced code blocks",
    )

    highlight_noclasses: bool = Field(
        default=True,
        description="Emit inline styles instead of CSS classes for highlighted code",
    )

    # Content configuration
    default_author: str = Field(
        default="創技 光",
        description="Author written into scaffolded front-matter and used as record default",
    )


class StorageSettings(BaseSettings):
    """
    Object-storage configuration.

    Public URL resolution uses exactly three tiers, checked in order:
        1. r2_public_url            -> <r2_public_url>/<category>/<file>
        2. cloudflare_account_id    -> https://pub-<id>.r2.dev/<category>/<file>
        3. r2_fallback_url          -> <r2_fallback_url>/<category>/<file>

    Credentials and bucket name are only needed by StorageService.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    r2_public_url: Optional[str] = Field(
        default=None,
        description="Public base URL override (custom domain) for stored objects",
    )

    cloudflare_account_id: Optional[str] = Field(
        default=None,
        description="Cloudflare account identifier; selects the pub-<id>.r2.dev form",
    )

    r2_fallback_url: str = Field(
        default="https://files.tukurugi.uk",
        description="Fixed fallback domain when neither public URL nor account id is set",
    )

    r2_access_key_id: Optional[str] = Field(default=None, description="R2 access key id")

    r2_secret_access_key: Optional[str] = Field(default=None, description="R2 secret access key")

    r2_bucket_name: str = Field(default="blog-files", description="R2 bucket name")

    def endpoint_make(self) -> str:
        """
        S3-compatible API endpoint for the configured account.

        Example:
            >>> StorageSettings(cloudflare_account_id="abc").endpoint_make()
            'https://abc.r2.cloudflarestorage.com'
        """
        return f"https://{self.cloudflare_account_id or ''}.r2.cloudflarestorage.com"


# Singleton instances - import these in your code
appsettings = AppSettings()
storagesettings = StorageSettings()
