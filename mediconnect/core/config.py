"""
Application configuration settings.
"""
import json
from typing import Annotated, List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application
    PROJECT_NAME: str = "MediConnect API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str = "mediconnect-development-secret-key-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Database
    DATABASE_URL: str = "sqlite:///./mediconnect.db"

    # CORS
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://localhost:8000"]

    # First admin account, created at startup when missing
    FIRST_ADMIN_EMAIL: str = "admin@mediconnect.health"
    FIRST_ADMIN_PASSWORD: str = "ChangeMe!2024"
    FIRST_ADMIN_NAME: str = "System Administrator"

    # Verification documents
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_DOCUMENT_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_DOCUMENT_TYPES: Annotated[List[str], NoDecode] = ["image/jpeg", "image/jpg", "image/png", "application/pdf"]
    ALLOWED_DOCUMENT_EXTENSIONS: Annotated[List[str], NoDecode] = [".jpg", ".jpeg", ".png", ".pdf"]
    USE_S3: bool = False
    AWS_S3_BUCKET: Optional[str] = None
    AWS_REGION: str = "us-east-1"

    # Logging
    LOG_FILE: Optional[str] = None
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    # Request lifecycle
    CANCEL_REQUIRES_SENT_STATUS: bool = True

    @field_validator('ALLOWED_HOSTS', 'ALLOWED_DOCUMENT_TYPES', 'ALLOWED_DOCUMENT_EXTENSIONS', mode='before')
    @classmethod
    def parse_list(cls, v):
        """Parse list settings from a comma-separated string or a list."""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                return json.loads(v)
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @field_validator('SECRET_KEY')
    @classmethod
    def validate_secret_key(cls, v):
        """Validate secret key length."""
        if len(v) < 32:
            raise ValueError('SECRET_KEY must be at least 32 characters long')
        return v

    @property
    def database_url_safe(self) -> str:
        """Get safe database URL for logging (hides password)."""
        if "@" in self.DATABASE_URL:
            scheme, rest = self.DATABASE_URL.split("://", 1)
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.DATABASE_URL


# Global settings instance
settings = Settings()
