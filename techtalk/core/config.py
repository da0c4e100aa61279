from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional

from techtalk.core.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Slack incoming webhook for contact notifications - must be provided via environment variables
    slack_webhook: Optional[str] = None
    # Comma separated list of extra JSON webhooks that receive every submission
    extra_webhook_urls: Optional[str] = None
    webhook_timeout_seconds: float = 10.0

    # Postal code lookup used by the address demo
    postcode_api_base_url: str = "https://postcode.teraren.com"
    postcode_timeout_seconds: float = 5.0

    # CORS settings
    allowed_origins: list[str] = ["*"]

    log_level: str = "INFO"

    @property
    def effective_webhook_url(self) -> str:
        """Get the Slack webhook URL, failing loudly when it is not configured"""
        url = (self.slack_webhook or "").strip()
        if not url:
            raise ConfigurationError("Slack webhook not configured! Please set SLACK_WEBHOOK in your environment variables.")
        return url

    @property
    def extra_webhook_url_list(self) -> List[str]:
        if not self.extra_webhook_urls:
            return []
        return [url.strip() for url in self.extra_webhook_urls.split(",") if url.strip()]


@lru_cache
def get_settings():
    return Settings()
