from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="APP_",
    )

    SECRET_KEY: str
    WORKERS: int = 1
    PORT: int = 5000
    DEBUG: bool = False
    CORS_ORIGINS: list[str] | str = "http://localhost:5173"
    APP_NAME: str = "HopeNest"
    APP_VERSION: str = "1.0.0"

    DATABASE_URL: str
    DATABASE_URL_SYNC: str | None = None

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24
    RESET_TOKEN_EXPIRE_MINUTES: int = 60

    FRONTEND_URL: str = "http://localhost:5173"
    API_PUBLIC_URL: str | None = None

    UPLOAD_DIR: str = str(BASE_DIR / "uploads")
    MAX_UPLOAD_FILES: int = 5
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024
    TEMPLATES_DIR: str = str(BASE_DIR / "templates")

    # approving a crowdfunding application normally does not look at the
    # organizer's email verification
    REQUIRE_EMAIL_VERIFIED_FOR_APPROVAL: bool = False

    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    SMTP_DEBUG: bool = False
    SMTP_TLS_REJECT_UNAUTH: bool = True
    FROM_EMAIL: str | None = None

    SES_ACCESS_KEY: str | None = None
    SES_SECRET_KEY: str | None = None
    SES_REGION: str = "ap-south-1"

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    FACEBOOK_CLIENT_ID: str | None = None
    FACEBOOK_CLIENT_SECRET: str | None = None

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    SQL_LOG: bool = False

    DISCORD_ERROR_WEBHOOK: str | None = None

    ENABLE_RATE_LIMITING: bool = False
    AUTH_RATE_LIMIT: str = "10 per 15 minutes"
    UPLOAD_RATE_LIMIT: str = "20 per hour"
    API_RATE_LIMIT: str = "100 per 15 minutes"
    ENABLE_SECURITY_HEADERS: bool = False

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [
                origin.strip()
                for origin in self.CORS_ORIGINS.split(",")
                if origin.strip()
            ]
        return self.CORS_ORIGINS

    @property
    def api_public_url(self) -> str:
        return (self.API_PUBLIC_URL or f"http://localhost:{self.PORT}").rstrip("/")

    @property
    def from_email(self) -> str:
        return self.FROM_EMAIL or self.SMTP_USER or "no-reply@hopenest.local"


settings = AppConfig()
