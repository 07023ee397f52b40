from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB (cache store)
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "link_preview"
    mongo_max_pool_size: int = 10
    mongo_connect_retries: int = 3

    # Preview cache
    cache_ttl_seconds: int = 3600

    # HTTP fetcher
    http_timeout: float = 5.0
    http_verify_ssl: bool = True  # set False behind corporate SSL-inspection proxies
    http_user_agent: str = "LinkPreviewBot/1.0"

    # Answer resolution errors with 200 and an empty record instead of 5xx
    legacy_error_responses: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"


settings = Settings()
