from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import List
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

# Only ever used outside production when SECRET_KEY is left unset
DEV_SECRET_KEY = "roomkart-dev-only-secret-change-me"


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./roomkart.db")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

    # Password hashing
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # App
    APP_NAME: str = os.getenv("APP_NAME", "RoomKart API")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5175,https://www.roomkartz.com,https://roomkartz.com",
    )

    # Inline property images
    MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))

    # New-listing email notifications
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "True") == "True"
    NOTIFY_EMAIL_FROM: str = os.getenv("NOTIFY_EMAIL_FROM", "Property Notifier <noreply@roomkartz.com>")
    NOTIFY_EMAIL_TO: str = os.getenv("NOTIFY_EMAIL_TO", "")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def jwt_secret(self) -> str:
        """Signing key for session tokens.

        Falls back to a development key when SECRET_KEY is unset; refuses to
        do so in production.
        """
        if self.SECRET_KEY:
            return self.SECRET_KEY
        if self.is_production:
            raise RuntimeError("SECRET_KEY must be set when ENVIRONMENT=production")
        return DEV_SECRET_KEY

    def check_secrets(self) -> None:
        if not self.SECRET_KEY:
            if self.is_production:
                raise RuntimeError("SECRET_KEY must be set when ENVIRONMENT=production")
            logger.warning("SECRET_KEY is not set; using the development-only signing key")


settings = Settings()
