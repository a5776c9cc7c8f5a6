from pathlib import Path
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


# Locate the nearest .env starting from this file's directory
def find_env_file() -> Path | None:
    current = Path(__file__).resolve()
    for parent in current.parents:
        env_file = parent / ".env"
        if env_file.exists():
            return env_file
    return None


ENV_FILE = find_env_file()
BASE_DIR = ENV_FILE.parent if ENV_FILE else Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    APP_NAME: str = "Trading Journal API"
    APP_VERSION: str = "2.0.0"

    # production / development; development exposes error details in 5xx bodies
    ENVIRONMENT: str = "production"

    # mysql / sqlite
    DB_TYPE: str = "mysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "trading_journal"
    SQLITE_PATH: str = "trading_journal.db"

    # Explicit override; built from the DB_* fields when empty
    DATABASE_URL: Optional[str] = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    AUTO_CREATE_TABLES: bool = True

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    DASHBOARD_RECENT_LIMIT: int = 5
    DASHBOARD_TOP_SYMBOLS: int = 3

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("DB_TYPE", "ENVIRONMENT", mode="before")
    @classmethod
    def _normalize_lower(cls, value: str) -> str:
        return str(value).strip().lower()

    @field_validator("SQLITE_PATH", mode="before")
    @classmethod
    def _resolve_sqlite_path(cls, value: str | Path) -> str:
        resolved_path = Path(value)
        if not resolved_path.is_absolute():
            resolved_path = BASE_DIR / resolved_path
        return str(resolved_path)

    @model_validator(mode="after")
    def _build_database_url(self) -> "Settings":
        if self.DATABASE_URL:
            return self
        if self.DB_TYPE == "sqlite":
            self.DATABASE_URL = f"sqlite+aiosqlite:///{self.SQLITE_PATH}"
        elif self.DB_TYPE == "mysql":
            self.DATABASE_URL = URL.create(
                "mysql+aiomysql",
                username=self.DB_USER,
                password=self.DB_PASSWORD or None,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DB_NAME,
                query={"charset": "utf8mb4"},
            ).render_as_string(hide_password=False)
        else:
            raise ValueError(f"Unsupported DB_TYPE: {self.DB_TYPE}")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()
