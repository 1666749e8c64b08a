from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Promotions Admin API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/promotions.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Admin bearer tokens
    AUTH_JWT_SECRET: str = "dev-admin-secret-change-me"
    AUTH_JWT_ALGORITHM: str = "HS256"

    # Used when the "currency" settings row is missing
    DEFAULT_CURRENCY: str = "CAD"

    # Pagination
    DISCOUNTS_PAGE_SIZE: int = 10
    USAGE_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    METRICS_TRAILING_DAYS: int = 30

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
