"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitPulse"
    DB_FILENAME = "habitpulse.db"

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("HABITPULSE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITPULSE_DATABASE_URL", self._build_sqlite_url())
        self.LOG_LEVEL = os.getenv("HABITPULSE_LOG_LEVEL", "INFO").upper()
        # 0 computes statuses inline; >0 sizes a thread pool.
        self.STATUS_WORKERS = _env_int("HABITPULSE_STATUS_WORKERS", 0)
        if self.STATUS_WORKERS < 0:
            raise ValueError("HABITPULSE_STATUS_WORKERS must not be negative.")

    def _resolve_data_dir(self, data_dir: Path | str | None) -> Path:
        """Return the directory where the SQLite database and logs live."""

        if data_dir is None:
            data_dir = os.getenv("HABITPULSE_DATA_DIR", "instance")
        path = Path(data_dir).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        options: dict[str, Any] = {"echo": False}
        if self.DATABASE_URL.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
        return options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Throwaway data directory and database for tests."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str) -> None:
        super().__init__(data_dir=data_dir)
        self.DEV_MODE = False
        self.DATABASE_URL = self._build_sqlite_url()
