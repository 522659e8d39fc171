from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from keydelivery.delivery_document import DEFAULT_TUTORIAL_URL
from keydelivery.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    admin_username: str | None = None
    admin_password: str | None = None

    api_scheme: Literal["http", "https"] = "http"
    api_host: str = "127.0.0.1"
    port: int = 12350
    request_timeout: float = 30.0

    timezone_offset: int = 8  # hours added to UTC for the default key name

    output_dir: Path = Path("data/xianyu-cc")
    ledger_path: Path = Path("data/xianyu-cc/created-keys.jsonl")
    tutorial_url: str = DEFAULT_TUTORIAL_URL

    @property
    def base_url(self) -> str:
        return f"{self.api_scheme}://{self.api_host}:{self.port}"

    def require_admin_credentials(self) -> tuple[str, str]:
        """Returns (username, password) or raises ConfigurationError if either is unset."""
        if not self.admin_username or not self.admin_password:
            raise ConfigurationError(
                "ADMIN_USERNAME and ADMIN_PASSWORD must be set in the environment or .env file"
            )
        return self.admin_username, self.admin_password


@lru_cache
def get_settings() -> Settings:
    return Settings()
