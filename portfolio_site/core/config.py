from pathlib import Path
from typing import List, Optional

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parents[1]

DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseSettings):
    PROJECT_NAME: str = "Portfolio Site"
    VERSION: str = "1.0.0"

    # --- Environment & Debug ---
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    LOG_FILE: Optional[str] = None

    # --- Mail transport ---
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[SecretStr] = None  # Gmail requires an app password
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT: Optional[float] = None
    OWNER_EMAIL: Optional[str] = None

    # --- Contact rate limiting ---
    CONTACT_RATE_LIMIT: int = 5
    CONTACT_RATE_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    TRUSTED_PROXIES: List[str] = Field(
        default_factory=lambda: ["127.0.0.1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16"],
        description="CIDR ranges of trusted reverse proxies for X-Forwarded-For",
    )

    # --- CORS ---
    SITE_URL: str = "https://your-domain.com"
    ALLOWED_ORIGINS: Optional[List[str]] = Field(
        default=None,
        validate_default=True,
        description="Allowed CORS origins; derived from ENVIRONMENT when unset",
    )
    ALLOWED_METHODS: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "OPTIONS"],
    )
    ALLOWED_HEADERS: List[str] = Field(
        default_factory=lambda: ["Content-Type", "Accept", "X-Request-ID"],
    )

    # --- Front-end bundle ---
    STATIC_DIR: Path = PACKAGE_DIR / "static"
    TEMPLATES_DIR: Path = PACKAGE_DIR / "templates"

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def default_allowed_origins(
        cls, v: Optional[List[str]], info: ValidationInfo
    ) -> List[str]:
        if v is None or (isinstance(v, str) and v.strip() in ("", "[]")) or v == []:
            if info.data.get("ENVIRONMENT") == "production":
                return [info.data.get("SITE_URL") or "https://your-domain.com"]
            return list(DEV_ORIGINS)
        return v

    @field_validator("RATE_LIMIT_BACKEND", mode="after")
    @classmethod
    def validate_rate_limit_backend(cls, v: str) -> str:
        if v not in ("memory", "redis"):
            raise ValueError("RATE_LIMIT_BACKEND must be 'memory' or 'redis'")
        return v

    @field_validator("LOG_FORMAT", mode="after")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def owner_address(self) -> Optional[str]:
        """Where owner notifications go; the sending account by default."""
        return self.OWNER_EMAIL or self.EMAIL_USER


settings = Settings()
