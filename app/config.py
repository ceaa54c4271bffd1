from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Runtime configuration, read from the environment (or a local .env file)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000
    # static: plain GET of the page; dynamic: headless Chromium via Playwright
    render_mode: Literal["static", "dynamic"] = "static"
    request_timeout: float = Field(30.0, gt=0, description="Timeout for page and file GETs")
    browser_timeout: float = Field(30.0, gt=0, description="Wait for the download button in dynamic mode")
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
