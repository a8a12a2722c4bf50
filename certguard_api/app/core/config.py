"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, with defaults for every field.  There is no
settings file; override values via the environment (or a ``.env``
loaded by your process manager) before this module is imported.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "CertGuard API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path for a log file in addition to console output.
    log_file: str = os.getenv("LOG_FILE", "")
    log_file_max_bytes: int = int(os.getenv("LOG_FILE_MAX_BYTES", str(5 * 1024 * 1024)))
    log_file_backups: int = int(os.getenv("LOG_FILE_BACKUPS", "3"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # Comma-separated list of origins allowed to call the API from a
    # browser.  ``*`` allows any origin, which suits the bundled admin
    # client served from a different dev port.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Populate the in-memory store with demo records at startup.  The
    # store is not persistent, so without seeding a fresh process starts
    # empty.
    seed_demo_data: bool = _env_bool("SEED_DEMO_DATA", "true")

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
