"""AppSettings -- LINC admin console configuration.

All environment variables are read via pydantic-settings.
JWT_SECRET is required and will cause a startup failure if missing.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """LINC admin console settings, loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Authentication - Required, shared with the upstream LINC API that issues tokens
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ADMIN_ROLE: str = "admin"

    # Upstream LINC REST API
    LINC_API_BASE_URL: str = "http://localhost:8000"
    LINC_API_VERSION: str = "v1"
    LINC_API_TIMEOUT_SECONDS: int = 30

    # List pages fetch everything, then filter in memory
    LIST_FETCH_LIMIT: int = 1000

    # User search
    USER_SEARCH_MIN_LENGTH: int = 2
    USER_SEARCH_DEBOUNCE_MS: int = 500
    USER_SEARCH_LIMIT: int = 50

    # Username generation: extra numbers probed against the server
    USERNAME_PROBE_ATTEMPTS: int = 50

    # Lookup data (provinces, phone codes) cache lifetime
    LOOKUP_CACHE_SECONDS: int = 300

    DEFAULT_COUNTRY_CODE: str = "ZA"

    LOG_LEVEL: str = "INFO"

    @property
    def api_root(self) -> str:
        return f"{self.LINC_API_BASE_URL.rstrip('/')}/api/{self.LINC_API_VERSION}"


settings = AppSettings()
