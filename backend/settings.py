from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


DEFAULT_CACHE_CONTROL = (
    "public, max-age=300, s-maxage=300, "
    "stale-while-revalidate=86400, stale-if-error=604800"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    github_token: str | None = None
    primary_user: str | None = None
    github_graphql_url: str = "https://api.github.com/graphql"
    github_api_base_url: str = "https://api.github.com"
    github_timeout_seconds: float = 20.0
    cache_control: str = DEFAULT_CACHE_CONTROL
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    rate_limit_trust_forwarded_for: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
