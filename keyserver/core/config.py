from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Key Server"

    # Infrastructure Configs (Env Vars)
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "keyserver"

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    BASE_URL: str = "http://localhost:8080"

    # Key lifecycle
    SESSION_TTL_HOURS: int = 24
    PREMIUM_KEY_TTL_DAYS: int = 30
    LICENSE_KEY_LENGTH: int = 16
    RECENT_ACCESS_LIMIT: int = 10
    BCRYPT_ROUNDS: int = 12

    # Bootstrap admin, seeded at startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 60
    # Only honour X-Forwarded-For for rate limiting behind a trusted proxy
    TRUST_FORWARDED_FOR: bool = False

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

settings = Settings()
