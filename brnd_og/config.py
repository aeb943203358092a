from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


_DEFAULT_ASSETS_DIR = Path(__file__).resolve().parent.parent / "static"


class Settings(BaseSettings):
    # Database
    database_url: str = ""
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_user: str = Field(default="root", validation_alias=AliasChoices("DB_USER", "DB_USERNAME"))
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_name: str = Field(default="brnd", validation_alias=AliasChoices("DB_NAME", "DB_DATABASE"))
    db_ssl: Optional[str] = Field(default=None, validation_alias="DB_SSL")
    log_sql: bool = False

    # Server
    environment: str = "development"
    log_level: str = "info"
    log_format: str = "json"
    allow_cors_origins: List[str] = ["*"]

    # Rendering
    assets_dir: Path = _DEFAULT_ASSETS_DIR
    fallback_image_url: str = "https://brnd.land/image.png"
    remote_image_timeout_seconds: float = 5.0
    remote_image_max_bytes: int = 5 * 1024 * 1024

    # Rate limiting
    image_rate_limit: str = "100/15minutes"
    rate_limit_enabled: bool = True

    @field_validator("db_port", mode="before")
    @classmethod
    def default_empty_port(cls, v: Any) -> Any:
        """An empty DB_PORT behaves like an unset one."""
        if v in (None, ""):
            return 3306
        return v

    @property
    def ssl_enabled(self) -> bool:
        return bool(self.db_ssl) and self.db_ssl != "false"

    def sqlalchemy_url(self) -> str:
        """Explicit database_url wins; otherwise a MySQL URL from the DB_* parts."""
        if self.database_url:
            return self.database_url
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    def connect_args(self) -> Dict[str, Any]:
        url = self.sqlalchemy_url()
        if url.startswith("sqlite"):
            return {"check_same_thread": False}
        if self.ssl_enabled:
            return {"ssl": {}}
        return {}

    class Config:
        env_prefix = "BRND_"
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Module-level singleton for convenience
settings = get_settings()
