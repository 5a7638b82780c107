from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Site Widgets"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./sitewidgets.db"

    # Security settings
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # CORS settings
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Working copy storage (Redis when configured, in-memory otherwise)
    redis_url: str | None = None
    working_copy_ttl_seconds: int = 3600

    # Public file serving
    public_base_url: str = "http://localhost:8000"
    files_url_prefix: str = "/files"
    upload_dir: str = "uploads"
    media_max_file_size: int = 10 * 1024 * 1024
    temporary_file_max_age_seconds: int = 6 * 60 * 60

    # Listing endpoints
    search_cache_max_age: int = 300

    # Logging
    log_level: str = "INFO"
    structured_logging: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
