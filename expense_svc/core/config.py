from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    DB_FILENAME, EXPENSE_STORE, AUTH_SERVICE_URL, AUTH_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Expense Service"
    debug: bool = False
    version: str = "0.1.0"
    host: str = "127.0.0.1"
    port: int = 8080

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "expenses.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    # Allowed: 'sqlite' (file backed), 'memory' (process local, tests/dev)
    expense_store: str = "sqlite"
    seed_demo_data: bool = False

    # Identity service delegation
    auth_service_url: AnyHttpUrl = "http://localhost:10001"
    auth_validate_path: str = "/auth/validate"
    auth_timeout_seconds: float = 5.0
    auth_id_header: str = "auth_id"
    auth_token_header: str = "auth_token"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        allowed = {"sqlite", "memory"}
        if self.expense_store not in allowed:
            raise ValueError(
                f"Unsupported expense_store '{self.expense_store}'. Allowed: {allowed}"
            )
        if self.expense_store == "sqlite":
            if self.db_path is None:
                self.db_path = self.data_dir / self.db_filename
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def auth_validate_url(self) -> str:
        return str(self.auth_service_url).rstrip("/") + self.auth_validate_path


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
