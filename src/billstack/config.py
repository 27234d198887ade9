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


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "BillStack"
    DB_FILENAME = "billstack.db"
    DEFAULT_OWNER_ID = "local"
    HISTORY_SIZE = 50

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("BILLSTACK_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("BILLSTACK_DATABASE_URL", self._build_sqlite_url())
        self.OWNER_ID = os.getenv("BILLSTACK_OWNER_ID", self.DEFAULT_OWNER_ID).strip() or self.DEFAULT_OWNER_ID
        self.CURRENCY_SYMBOL = os.getenv("BILLSTACK_CURRENCY", "$")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("BILLSTACK_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations: fall back to user-local storage.
            local_app_data = os.getenv("LOCALAPPDATA") or (Path.home() / "AppData" / "Local")
            fallback_path = Path(local_app_data).expanduser() / self.APP_NAME
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            # Persistence runs on a background thread in the desktop app.
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False
