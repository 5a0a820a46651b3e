from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    HOST: str = Field("0.0.0.0")
    PORT: int = Field(4000)

    DATABASE_URL: str = Field("sqlite+aiosqlite:///./attendance.db")
    SQLALCHEMY_DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = Field(False)

    # Startup connectivity check
    DB_CONNECT_RETRIES: int = Field(10, ge=1)
    DB_CONNECT_RETRY_DELAY_MS: int = Field(2000, ge=0)

    # Whether the users/events directory tables are part of the store
    ATTENDANCE_ENRICHMENT: bool = Field(True)

    PUBLIC_DIR: Path = Field(PROJECT_ROOT / "public")

    # Comma-separated origins. "*" → allow any origin.
    CORS_ORIGINS: str = Field("*")

    LOG_LEVEL: str = Field("INFO")

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        return self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
