"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Indexer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings (primary store)
    db_server: str = "localhost"
    db_name: str = "labrinth"
    db_user: str = "labrinth"
    db_password: str = ""
    db_port: int = 5432
    db_pool_size: int = 10
    db_max_overflow: int = 20
    sql_echo: bool = False

    # Redis settings (record cache and arq broker)
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 50
    redis_socket_timeout: float = 5.0
    redis_retry_on_timeout: bool = True

    # Cached project/version records expire after this many seconds
    cache_expiry_seconds: int = 1800

    # Max ids per IN (...) clause when batch-loading records
    indexing_batch_size: int = 1000

    # Meilisearch settings
    meilisearch_url: str = "http://localhost:7700"
    meilisearch_api_key: str = ""
    meilisearch_timeout: int = 30
    meilisearch_index_name: str = "projects"
    meilisearch_upload_batch_size: int = 10000

    # ARQ Worker settings
    # Indexing job: runs at these hours (comma-separated, 24h format)
    # Set to empty string "" to use arq_indexing_minutes instead
    arq_indexing_hours: str = "0,6,12,18"

    # Indexing job: runs at these minutes (comma-separated, 0-59)
    # Only used if arq_indexing_hours is empty
    arq_indexing_minutes: str = ""

    @property
    def database_url(self) -> str:
        """Build PostgreSQL async connection string."""
        from urllib.parse import quote_plus
        return (
            f"postgresql+asyncpg://{self.db_user}:{quote_plus(self.db_password)}"
            f"@{self.db_server}:{self.db_port}/{self.db_name}"
        )


# Global settings instance
settings = Settings()
