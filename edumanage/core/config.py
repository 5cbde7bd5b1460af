import json
from datetime import timedelta
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "EduManage"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./edumanage.db")
    DB_ECHO: bool = Field(default=False)
    DB_POOL_SIZE: int = Field(default=20)
    DB_MAX_OVERFLOW: int = Field(default=10)
    DB_POOL_TIMEOUT: int = Field(default=30)
    DB_POOL_RECYCLE: int = Field(default=1800)

    # Authentication Settings
    SECRET_KEY: SecretStr = Field(default=SecretStr("change-me-in-production-please-32b"))
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)
    TOKEN_ISSUER: str = Field(default="edumanage")
    MIN_PASSWORD_LENGTH: int = Field(default=6)
    BCRYPT_ROUNDS: int = Field(default=12)

    # CORS Settings, comma separated or a JSON list
    ALLOWED_ORIGINS: str = Field(default="*")

    # Redis backs the query cache shared by every worker
    REDIS_URL: str = Field(default="redis://localhost:6379/0")
    QUERY_CACHE_TTL_SECONDS: int = Field(default=300)
    QUERY_CACHE_NAMESPACE: str = Field(default="edumanage:cache")

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    # Platform bootstrap
    SUPER_ADMIN_EMAIL: Optional[str] = Field(default=None)
    SUPER_ADMIN_PASSWORD: Optional[SecretStr] = Field(default=None)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("MIN_PASSWORD_LENGTH")
    @classmethod
    def validate_min_password_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MIN_PASSWORD_LENGTH must be positive")
        return v

    def get_allowed_origins(self) -> List[str]:
        raw = self.ALLOWED_ORIGINS.strip()
        if raw.startswith("["):
            try:
                return [str(origin) for origin in json.loads(raw)]
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    def get_jwt_key(self) -> str:
        return self.SECRET_KEY.get_secret_value()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )


# Initialize settings
settings = Settings()


def get_token_expires_delta(minutes: Optional[int] = None) -> timedelta:
    if minutes is None:
        minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return timedelta(minutes=minutes)
