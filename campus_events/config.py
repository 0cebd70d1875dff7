from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, configurable via environment variables or a .env file"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    PROJECT_NAME: str = "Campus Events"
    API_VERSION: str = "0.1.0"
    ENV: str = "development"
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Database
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "campus_events"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    CREATE_TABLES_ON_STARTUP: bool = True

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Comma-separated CORS_ORIGINS_STR plus the frontend URL"""
        origins = [o.strip() for o in self.CORS_ORIGINS_STR.split(",") if o.strip()]
        if self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins


settings = Settings()
