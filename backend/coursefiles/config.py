"""Course Files configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default allow-list of the host platform's core licenses
DEFAULT_LICENSES = (
    "unknown,allrightsreserved,public,cc,cc-nd,cc-nc-nd,cc-nc,cc-nc-sa,cc-sa"
)


class Settings(BaseSettings):
    """Application settings for the course file listing service."""

    app_name: str = "CourseFiles"
    debug: bool = True
    environment: str = "development"
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Auth — tokens are issued by the LMS and only decoded here
    secret_key: str = "change-me-in-prod"
    token_algorithm: str = "HS256"

    # Base URL of the LMS, used for download/navigation links
    wwwroot: str = "http://localhost"

    # Storage paths (relative resolved from project root at runtime)
    data_dir: str = "./data"
    database_path: str = "./data/coursefiles.db"
    max_db_connections: int = 5

    # Licenses: comma-separated allow-list and "<code> <rrggbb>" colour pairs
    licenses: str = DEFAULT_LICENSES
    license_colors: str = ""

    # Listing / relicensing limits
    max_files_per_change: int = 500
    default_per_page: int = 200
    max_per_page: int = 500

    # Components starting with this prefix hold student submissions
    submission_component_prefix: str = "assign"

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="COURSEFILES_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @field_validator("wwwroot")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Ensure data paths are absolute."""
        base = Path(__file__).resolve().parent.parent  # backend/
        for field in ("data_dir", "database_path"):
            val = getattr(self, field)
            if not Path(val).is_absolute():
                setattr(self, field, str(base / val))
        return self

    @property
    def license_codes(self) -> list[str]:
        """Allow-list as an ordered list, blank entries dropped."""
        return [code.strip() for code in self.licenses.split(",") if code.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
