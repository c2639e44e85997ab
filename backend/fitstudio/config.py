# backend/fitstudio/config.py

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/studio.db"
    redis_url: Optional[str] = None
    redis_socket_timeout: float = 2.0

    # Placeholder admin gate: shared token sent as X-Admin-Token
    admin_token: Optional[str] = None

    rate_limit_backend: Literal["memory", "redis"] = "memory"
    rate_limit_max_requests: int = 5
    rate_limit_window_seconds: int = 60
    # Honour X-Forwarded-For / X-Real-IP only when a reverse proxy sets them
    trust_proxy_headers: bool = False

    site_url: str = "http://localhost:3000"
    studio_timezone: Optional[str] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative SQLite path -> absolute, anchored at the repo root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
