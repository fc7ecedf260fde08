"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Review Box API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security
    # SECRET_KEY is the JWT secret shared with the OAuth provider that issues access tokens
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str = "authenticated"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"]
    )

    # Database
    DATABASE_URL: str
    # Sync URL for Alembic migrations
    DATABASE_URL_SYNC: str | None = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # File Storage
    STORAGE_PATH: str = "/reviewbox/images"
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024  # 5MB

    # Where uploaded images are served from (nginx in production)
    IMAGE_BASE_URL: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Display ID generation
    DISPLAY_ID_LENGTH: int = 6
    DISPLAY_ID_MAX_ATTEMPTS: int = 20
    DISPLAY_ID_FALLBACK_LENGTH: int = 8

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class MemberRole:
    """Review group membership roles"""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    # Roles allowed to edit or delete any subject in the group
    SUBJECT_MANAGERS = (OWNER, ADMIN)


class InvitationStatus:
    """Invitation status constants (only PENDING is enforced for duplicates)"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class MetadataFieldType:
    """Allowed metadata field types for review group schemas"""

    TEXT = "text"
    SELECT = "select"


class Limits:
    """Field length and value limits"""

    USERNAME_MAX = 10
    GROUP_NAME_MAX = 100
    DESCRIPTION_MAX = 500
    CRITERION_NAME_MAX = 100
    SUBJECT_NAME_MAX = 200
    METADATA_FIELDS_MAX = 5
    MIN_SCORE = 1
    MAX_SCORE = 5
