"""Runtime settings — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
NEXUSDL_* environment variables.  These cover process-wide knobs (logging,
HTTP timeouts, endpoint defaults); per-run repository and artifact settings
live in ``nexusdl.models.config.DownloaderConfig``.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from nexusdl.models.config import (
    DEFAULT_GITHUB_PACKAGES_URL,
    DEFAULT_MAVEN_CENTRAL_URL,
    DEFAULT_NEXUS_SEARCH_PATH,
)


class DownloaderSettings(BaseSettings):
    """Process settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export NEXUSDL_LOG_LEVEL=DEBUG
        export NEXUSDL_CONFIG_SERVER=downloader-config.example.com
        export NEXUSDL_HTTP_READ_TIMEOUT=120

    Or via .env file::

        NEXUSDL_CONFIG_SERVER_INSECURE=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NEXUSDL_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # HTTP client
    http_connect_timeout: float = 10.0
    http_read_timeout: float = 60.0
    user_agent: str = "nexusdl/0.1.0"

    # Endpoint defaults, used when a configuration does not name them
    maven_central_url: str = DEFAULT_MAVEN_CENTRAL_URL
    github_packages_url: str = DEFAULT_GITHUB_PACKAGES_URL
    nexus_search_path: str = DEFAULT_NEXUS_SEARCH_PATH

    # Configuration server (serves named configuration variants per project)
    config_server: str = ""
    config_server_insecure: bool = False  # plain http instead of https


# Module-level singleton, import as `from nexusdl.config import settings`
settings = DownloaderSettings()
