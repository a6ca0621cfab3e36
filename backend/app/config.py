"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Secrets come from environment variables or *_FILE secret mounts (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - DATABASE_URL wins over MYSQL_*; with neither, SQLite at SQLITE_DB_LOCATION
    - STATIC_DIR defaults to backend/static, independent of the working directory

Design Decisions:
    - MYSQL_HOST / MYSQL_USER / MYSQL_PASSWORD / MYSQL_DB match the compose deployment contract
    - *_FILE variants read Docker secrets; file content replaces the plain value
"""

from functools import lru_cache
from pathlib import Path
from urllib.parse import quote_plus

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str | None = None

    mysql_host: str | None = None
    mysql_port: int = 3306
    mysql_user: str = "root"
    mysql_password: str = ""
    mysql_db: str = "todos"

    mysql_host_file: Path | None = None
    mysql_user_file: Path | None = None
    mysql_password_file: Path | None = None
    mysql_db_file: Path | None = None

    sqlite_db_location: str = "/etc/todos/todo.db"

    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_wait_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = str(_BACKEND_DIR / "static")

    # API
    api_prefix: str = "/api"
    greeting: str = "Hello world!"
    cors_origins: list[str] = []

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @model_validator(mode="after")
    def read_secret_files(self) -> "Settings":
        """Replace MYSQL_* values with the contents of their *_FILE counterparts."""
        for name in ("mysql_host", "mysql_user", "mysql_password", "mysql_db"):
            path = getattr(self, f"{name}_file")
            if path is not None:
                setattr(self, name, Path(path).read_text(encoding="utf-8").strip())
        return self

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url_resolved.startswith("sqlite")

    @property
    def database_url_resolved(self) -> str:
        if self.database_url:
            return self.database_url
        if self.mysql_host:
            return (
                f"mysql+aiomysql://{quote_plus(self.mysql_user)}"
                f":{quote_plus(self.mysql_password)}"
                f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_db}"
            )
        return f"sqlite+aiosqlite:///{self.sqlite_db_location}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
