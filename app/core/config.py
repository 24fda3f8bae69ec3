from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_ENV: str = "development"
    DEPLOYMENT_MODE: str = "server"   # "server" | "serverless"
    HOST: str = "0.0.0.0"
    PORT: int = 5001

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"   # "text" | "json"

    # Database
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "abowe-whitelist"
    MONGODB_COLLECTION: str = "waitlist"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # CORS
    CORS_PRODUCTION_ORIGINS: list[str] = ["https://www.abowe.ae"]
    CORS_DEVELOPMENT_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Waitlist
    WAITLIST_SOURCE: str = "landing-page"

    @property
    def cors_origins(self) -> list[str]:
        if self.APP_ENV == "production":
            return self.CORS_PRODUCTION_ORIGINS
        return self.CORS_DEVELOPMENT_ORIGINS

    @property
    def lazy_connect(self) -> bool:
        return self.DEPLOYMENT_MODE == "serverless"


settings = Settings()
