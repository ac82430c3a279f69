"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class CardConfig(BaseSettings):
    """Configuration for the ghcard renderer."""

    # Upstream settings
    github_token: str | None = None
    api_base_url: str = "https://api.github.com"
    web_base_url: str = "https://github.com"
    qr_service_url: str = "https://api.qrserver.com/v1/create-qr-code/"
    request_timeout_s: float = 10.0
    user_agent: str = "ghcard/0.1.0"

    # Response settings
    cache_max_age: int = 60

    # Fonts
    font_path: str | None = None
    bold_font_path: str | None = None
    emoji_font_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "GHCARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def web_host(self) -> str:
        """Host part of the web URL, e.g. ``github.com``."""
        return self.web_base_url.split("://", 1)[-1].rstrip("/")
