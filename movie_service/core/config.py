from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Core
    DATABASE_URL: str = "sqlite:///./movies.db"
    ALLOWED_ORIGINS: str | None = "*"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Catalog
    SEED_ON_STARTUP: bool = True
    MOVIE_EVENT_INTERVAL_SECONDS: float = Field(default=1.0, gt=0)

    # Fixed principals
    ADMIN_USERNAME: str = "springrod"
    ADMIN_PASSWORD: str = "pw"
    USER_USERNAME: str = "starbuxman"
    USER_PASSWORD: str = "pw"

    @property
    def cors_origins(self) -> List[str]:
        if not self.ALLOWED_ORIGINS:
            return []
        raw = self.ALLOWED_ORIGINS
        if isinstance(raw, str):
            return [o.strip() for o in raw.split(",") if o.strip()]
        return list(raw)
