from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./crypto_ramp.db"

    MOONPAY_API_KEY: str = ""
    MOONPAY_BASE_URL: AnyHttpUrl = "https://api.moonpay.com"
    MOONPAY_TIMEOUT_SECONDS: float = 30
    # Signature checks on /api/webhook/moonpay are skipped when unset
    MOONPAY_WEBHOOK_KEY: str | None = None

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
