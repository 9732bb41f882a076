from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Seatbook API"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Single administrator; set ADMIN_PASSWORD_HASH (bcrypt) in production
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-this-admin-password"
    ADMIN_PASSWORD_HASH: Optional[str] = None

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "12345"
    POSTGRES_DB: str = "seatbook_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    LOG_LEVEL: str = "INFO"

    # Booking rules
    PRICE_PER_SEAT: int = 50
    MAX_SEATS_PER_BOOKING: int = 5
    ALLOW_MULTIPLE_BOOKINGS_PER_EMAIL: bool = True
    BOOKINGS_PAGE_SIZE: int = 5

    # Receipt storage (Supabase Storage REST API)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    STORAGE_BUCKET: str = "booking"
    RECEIPT_MAX_BYTES: int = 10 * 1024 * 1024
    RECEIPT_ALLOWED_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/pdf",
    ]
    RECEIPT_UPLOAD_MAX_ATTEMPTS: int = 3
    RECEIPT_UPLOAD_TIMEOUT_SECONDS: float = 30.0
    RECEIPT_UPLOAD_BACKOFF_SECONDS: float = 1.0

    # Confirmation email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None
    EMAIL_FROM_NAME: str = "Seatbook"
    NOTIFY_MAX_ATTEMPTS: int = 3
    NOTIFY_BACKOFF_SECONDS: float = 2.0

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def uses_postgres(self) -> bool:
        return self.DATABASE_URL.startswith("postgresql")

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
