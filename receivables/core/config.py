from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Receivables"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DOMAIN: str = "localhost"
    APP_DATABASE_DSN: str = "sqlite:////tmp/receivables.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Authentication
    JWT_SECRET: str = "change-me-receivables-secret"
    ACCESS_TOKEN_TTL_MINUTES: int = 0  # 0 disables the exp claim
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Rate limiting
    LOGIN_RATE_LIMIT_PER_MINUTE: int = 20

    # Invoices
    DEFAULT_PAYMENT_TERMS_DAYS: int = 30
    PAYMENT_LINK_BASE_URL: str = "http://localhost:3000"
    PAYMENT_AMOUNT_STRICT: bool = True

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def token_expiry_enabled(self) -> bool:
        return self.ACCESS_TOKEN_TTL_MINUTES > 0


settings = Settings()
