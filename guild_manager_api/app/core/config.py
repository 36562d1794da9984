"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, with defaults for every field.  Tests and
embedding code may build their own ``Settings`` instance and pass it
to ``create_app`` instead of touching the environment.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Guild Manager API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional log file; when empty only the console handler is used.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "guilds.db")

    # Insert the three example guilds on first start.  Rows are only
    # inserted when absent, so restarts never duplicate them.
    seed_examples: bool = _env_flag("SEED_EXAMPLES", "true")

    # Comma‑separated list of origins allowed by CORS, e.g.
    # CORS_ORIGINS="http://localhost:5173,https://guilds.example.com".
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
