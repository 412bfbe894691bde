"""
TorBox Resolver Configuration Management
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Database (availability cache)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./torbox_resolver.db",
        alias="DATABASE_URL"
    )
    
    # TorBox API
    torbox_api_url: str = Field(default="https://api.torbox.app/v1/api", alias="TORBOX_API_URL")
    check_cached_batch_size: int = Field(default=100, ge=1, alias="TORBOX_CHECK_BATCH_SIZE")
    check_cached_concurrency: int = Field(default=1, ge=1, alias="TORBOX_CHECK_CONCURRENCY")  # per API key
    read_timeout: float = Field(default=10.0, alias="TORBOX_READ_TIMEOUT")
    create_timeout: float = Field(default=15.0, alias="TORBOX_CREATE_TIMEOUT")
    
    # Availability cache lifetimes (in seconds)
    availability_ttl: int = Field(default=8 * 60 * 60, alias="AVAILABILITY_TTL")  # 8 hours
    availability_empty_ttl: int = Field(default=30 * 60, alias="AVAILABILITY_EMPTY_TTL")  # 30 minutes
    availability_cleanup_interval: int = Field(default=3600)  # 1 hour
    
    # Where the static failure videos are served from
    static_base_url: str = Field(default="http://localhost:8000/static", alias="STATIC_BASE_URL")
    
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    
    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
