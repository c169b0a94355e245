# s3_secure_downloads/core/config.py
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3_secure_downloads.models.asset import PluginSettings


class Settings(BaseSettings):
    """
    Process-wide settings, loaded once at startup.

    - Plugin settings (expiry, forced download, login requirement) are
      handed to the signing core as a frozen PluginSettings value.
    - Store credentials live per volume in the asset index, not here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", alias="ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Plugin settings
    require_logged_in_user: bool = Field(default=False, alias="REQUIRE_LOGGED_IN_USER")
    link_expiration_time: int = Field(default=86400, ge=0, alias="LINK_EXPIRATION_TIME")
    force_file_download: bool = Field(default=False, alias="FORCE_FILE_DOWNLOAD")

    # Security
    user_api_key: str = Field(default="", alias="USER_API_KEY")

    # Asset index
    assets_index_path: str = Field(default="assets/index.json", alias="ASSETS_INDEX_PATH")
    assets_cache_ttl_sec: int = Field(default=60, ge=0, alias="ASSETS_CACHE_TTL_SEC")

    # Extension points, "package.module:attr" comma-separated
    sign_hooks: str = Field(default="", alias="SIGN_HOOKS")

    @property
    def sign_hooks_list(self) -> list[str]:
        return [h.strip() for h in self.sign_hooks.split(",") if h.strip()]

    def plugin_settings(self) -> PluginSettings:
        return PluginSettings(
            requireLoggedInUser=self.require_logged_in_user,
            linkExpirationTimeSeconds=self.link_expiration_time,
            forceFileDownload=self.force_file_download,
        )


settings = Settings()
