from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    http_client_backend: str = Field("httpx", validation_alias="HTTP_CLIENT_BACKEND")
    browser_backend: str = Field("playwright", validation_alias="BROWSER_BACKEND")

    fetch_connect_timeout_seconds: float = Field(5.0, validation_alias="FETCH_CONNECT_TIMEOUT_SECONDS")
    fetch_read_timeout_seconds: float = Field(5.0, validation_alias="FETCH_READ_TIMEOUT_SECONDS")
    # Random pause between two client-identity attempts.
    fetch_delay_min_seconds: float = Field(2.0, validation_alias="FETCH_DELAY_MIN_SECONDS")
    fetch_delay_max_seconds: float = Field(3.0, validation_alias="FETCH_DELAY_MAX_SECONDS")
    redirect_timeout_seconds: float = Field(5.0, validation_alias="REDIRECT_TIMEOUT_SECONDS")

    browser_fallback_enabled: bool = Field(True, validation_alias="BROWSER_FALLBACK_ENABLED")
    browser_navigation_timeout_seconds: float = Field(30.0, validation_alias="BROWSER_NAVIGATION_TIMEOUT_SECONDS")
    browser_settle_seconds: float = Field(3.0, validation_alias="BROWSER_SETTLE_SECONDS")
    browser_challenge_wait_seconds: float = Field(5.0, validation_alias="BROWSER_CHALLENGE_WAIT_SECONDS")
    browser_title_wait_timeout_seconds: float = Field(10.0, validation_alias="BROWSER_TITLE_WAIT_TIMEOUT_SECONDS")
    browser_user_agent: str = Field(DEFAULT_BROWSER_USER_AGENT, validation_alias="BROWSER_USER_AGENT")
    browser_locale: str = Field("ko-KR", validation_alias="BROWSER_LOCALE")
    browser_viewport_width: int = Field(1920, validation_alias="BROWSER_VIEWPORT_WIDTH")
    browser_viewport_height: int = Field(1080, validation_alias="BROWSER_VIEWPORT_HEIGHT")

    max_title_length: int = Field(200, validation_alias="MAX_TITLE_LENGTH")
    max_description_length: int = Field(300, validation_alias="MAX_DESCRIPTION_LENGTH")

    resolution_queue_interval_seconds: float = Field(0.1, validation_alias="RESOLUTION_QUEUE_INTERVAL_SECONDS")
