from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    JWT_SECRET: str
    JWT_ISSUER: str = "signup-dashboard"

    ACCESS_TTL_MIN: int = 15
    REFRESH_TTL_DAYS: int = 30

    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = False

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # viewer's local time zone for "today"/"ytd" boundaries and table dates
    DISPLAY_TIMEZONE: str = "UTC"
    ACTIVATION_RATE_TARGET: float = 25.0

    # optional operator created on startup when the users table is empty
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None


settings = Settings()
