"""
Configuration helpers for the federation data layer.

Repositories and services read a Settings object instead of fetching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_DIR = ROOT_DIR / "data"
STORE_BACKENDS = ("json", "sql", "memory")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    store_backend: str
    data_file: str
    database_url: str
    key_prefix: str
    log_level: str
    log_json: bool
    admin_username: str
    admin_password: str
    admin_email: str
    min_password_length: int
    serialize_writes: bool
    verify_actor: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    backend = (os.getenv("FEDERATION_STORE_BACKEND") or "json").strip().lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"FEDERATION_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        store_backend=backend,
        data_file=os.getenv("FEDERATION_DATA_FILE", str(DEFAULT_DATA_DIR / "federation.json")),
        database_url=os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DATA_DIR / 'federation.db'}"),
        key_prefix=os.getenv("FEDERATION_KEY_PREFIX", ""),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("LOG_JSON"), False),
        admin_username=os.getenv("FEDERATION_ADMIN_USERNAME", "admin123"),
        admin_password=os.getenv("FEDERATION_ADMIN_PASSWORD", "12345"),
        admin_email=os.getenv("FEDERATION_ADMIN_EMAIL", "admin@hockeyapp.com"),
        min_password_length=_int(os.getenv("MIN_PASSWORD_LENGTH", "5"), 5),
        serialize_writes=_bool(os.getenv("FEDERATION_SERIALIZE_WRITES"), False),
        verify_actor=_bool(os.getenv("FEDERATION_VERIFY_ACTOR"), False),
    )
