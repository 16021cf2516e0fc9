from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SALON_API_BASE_URL: str | None = None
    SALON_API_TIMEOUT: float = 10.0
    SALON_API_TOKEN: str | None = None
    USE_MOCK_API: bool = False

    OPENING_HOUR: int = 10
    CLOSING_HOUR: int = 20
    SLOT_MINUTES: int = 30

    BUSINESS_NAME: str = "Salon"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"


settings = Settings()
