"""Configuration using pydantic-settings."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "ResourceHealth/0.1 (+https://github.com/resource-health)"


class HealthCheckSettings(BaseSettings):
    """Engine and transport configuration."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    max_connections: int = 100
    max_keepalive_connections: int = 20

    max_concurrency: int = 5
    max_request_retries: int = 3
    request_handler_timeout: float = 60.0
    poll_interval: float = 0.1

    browser_timeout: float = 30.0
    browser_pool_size: int = 3
    headless: bool = True
    navigation_wait_until: Literal["commit", "load", "domcontentloaded", "networkidle"] = "domcontentloaded"

    # Zenscrape rejects concurrent calls
    rate_limit_delay: float = 5.0
    zenscrape_max_request_retries: int = 6
    zenscrape_same_domain_delay: float = 5.0

    model_config = SettingsConfigDict(env_prefix="HEALTHCHECK_")


class Credentials(BaseSettings):
    """Third-party API credentials, read from the environment or ``.env``."""

    youtube_api_key: SecretStr | None = None
    zenscrape_api_key: SecretStr | None = None
    udemy_affiliate_api_client_id: SecretStr | None = None
    udemy_affiliate_api_client_secret: SecretStr | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = HealthCheckSettings()
