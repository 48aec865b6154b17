from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the PostgreSQL browser.

    Values are loaded from environment variables and `.env`.

    Notes:
    - The bootstrap login is only used to probe the server and to list
      roles/databases; the operator authenticates separately afterwards.
    - Logs go to a file because the terminal belongs to the UI.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Server
    PGBROWSE_HOST: str = Field(default="localhost")
    PGBROWSE_PORT: int = Field(default=5432)
    PGBROWSE_CONNECT_TIMEOUT: int = Field(default=5)

    # Bootstrap login (first connection, before the operator picks a role)
    PGBROWSE_BOOTSTRAP_USER: str = Field(default="postgres")
    PGBROWSE_BOOTSTRAP_PASSWORD: str = Field(default="postgres")
    PGBROWSE_BOOTSTRAP_DATABASE: str = Field(default="postgres")

    # Background workers for database commands
    PGBROWSE_MAX_WORKERS: int = Field(default=4)

    # Logging (diagnostic; never printed to the terminal while the UI runs)
    PGBROWSE_LOG_DIR: Path = Field(default=Path("_logs"))
    PGBROWSE_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days). Old log files are auto-deleted.
    PGBROWSE_LOG_BACKUP_COUNT: int = Field(default=14)

    def bootstrap_credentials(self) -> tuple[str, str, str]:
        """Return (user, password, database) for the bootstrap connection."""
        return (
            self.PGBROWSE_BOOTSTRAP_USER,
            self.PGBROWSE_BOOTSTRAP_PASSWORD,
            self.PGBROWSE_BOOTSTRAP_DATABASE,
        )


def load_settings() -> Settings:
    s = Settings()
    if s.PGBROWSE_MAX_WORKERS < 1:
        s.PGBROWSE_MAX_WORKERS = 1
    return s
