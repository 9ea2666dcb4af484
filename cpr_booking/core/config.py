from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "Anytime CPR & Health Services"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SIMPLYBOOK_COMPANY_LOGIN: str | None = None
    SIMPLYBOOK_API_KEY: str | None = None
    SIMPLYBOOK_API_URL: str = "https://user-api.simplybook.me"
    SIMPLYBOOK_LOGIN_URL: str = "https://user-api.simplybook.me/login"
    SIMPLYBOOK_TIMEOUT_SECONDS: float = 10.0

    STRIPE_WEBHOOK_SECRET: str | None = None
    STRIPE_WEBHOOK_TOLERANCE_SECONDS: int = 300

    PLACEHOLDER_PHONE: str = "+15555555555"

    AVAILABILITY_SCAN_DAYS: int = 10
    AVAILABILITY_MAX_DAYS: int = 3
    AVAILABILITY_SLOTS_PER_DAY: int = 3

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() in {"dev", "local"}

    @property
    def simplybook_configured(self) -> bool:
        return bool(self.SIMPLYBOOK_COMPANY_LOGIN and self.SIMPLYBOOK_API_KEY)


settings = Settings()
