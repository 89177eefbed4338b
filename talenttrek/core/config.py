"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "talenttrek"
    postgres_password: str = "password"
    postgres_db: str = "talenttrek"

    # Full SQLAlchemy URL, overrides the postgres_* parts when set
    database_url: str = ""

    # MongoDB (object storage via GridFS)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "talenttrek_files"
    storage_bucket: str = "uploads"

    # DeepSeek AI (OpenAI-compatible) - interview question generator
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"
    interview_question_count: int = 8

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440
    session_cookie_name: str = "tt_session"
    session_cookie_secure: bool = False

    # Uploads
    public_base_url: str = ""
    max_resume_size_mb: int = 5
    max_photo_size_mb: int = 5

    # Recruiter dashboard bounds
    dashboard_recent_jobs: int = 5
    dashboard_recent_applications: int = 5

    # App
    debug: bool = False
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        url = self.database_url or self.postgres_url
        # Heroku/Render style URLs
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TALENTTREK_",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
