from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SERVER_URL: str | None = None  # e.g. http://localhost:8080
    LOGIN_PATH: str = "/auth/google/login"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    BROWSER_COOKIE_NAME: str = "cinemaflix_browser"

    # In-memory workflow store eviction
    WORKFLOW_IDLE_TTL_SECONDS: float = 1800.0
    CONFIRMED_WORKFLOW_TTL_SECONDS: float = 300.0
    SESSION_TTL_SECONDS: float = 86400.0

    @property
    def login_url(self) -> str:
        base = (self.SERVER_URL or "http://localhost:8080").rstrip("/")
        return f"{base}{self.LOGIN_PATH}"


settings = Settings()
