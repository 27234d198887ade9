"""Settings repository for app-level key/value pairs."""

from __future__ import annotations

from typing import Optional

from ...models.settings import AppSetting
from ..database import SessionFactory


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            setting = session.get(AppSetting, key)
            return setting.value if setting is not None else None

    def set(self, key: str, value: str, description: str | None = None) -> None:
        with self.session_factory() as session:
            setting = session.get(AppSetting, key)
            if setting is None:
                setting = AppSetting(key=key, value=value, description=description)
            else:
                setting.value = value
                if description is not None:
                    setting.description = description
            session.add(setting)
            session.commit()


__all__ = ["SQLModelSettingsRepository"]
