from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Spendora API"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/spendora.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Auth
    JWT_SECRET: str = "spendora-development-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30

    DEFAULT_CURRENCY: str = "USD"

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # Renewal sweep
    RENEWAL_SWEEP_INTERVAL_MINUTES: int = 1440  # must divide an hour or a day evenly
    RENEWAL_ITEM_TIMEOUT_SECONDS: float = 10.0

    # Upcoming renewal reminders
    REMINDER_LOOKAHEAD_DAYS: int = 3
    REMINDER_HOUR: int = 9  # UTC

    # Real-time events
    EVENTS_CHANNEL: str = "spendora:events"
    EVENTS_RELAY_ENABLED: bool = True
    EVENTS_RELAY_RETRY_SECONDS: float = 1.0
    EVENTS_RELAY_MAX_RETRY_SECONDS: float = 60.0

    # SMTP
    SMTP_HOST: str = ""  # empty disables email delivery
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "noreply@spendora.app"
    SMTP_FROM_NAME: str = "Spendora"
    SMTP_USE_TLS: bool = True

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
