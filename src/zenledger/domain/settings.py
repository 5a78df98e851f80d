"""Settings domain service."""

from typing import Any

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import Setting, SettingKey


class SettingsService:
    """Key-value settings store access."""

    def __init__(self, db: Database):
        """Initialize settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get(self, key: SettingKey | str, default: Any = None) -> Any:
        """Get a setting value, or default if unset."""
        value = self.db.get_setting(self._key(key))
        return default if value is None else value

    def set(self, key: SettingKey | str, value: Any) -> None:
        """Store a setting value."""
        self.db.set_setting(self._key(key), value)

    def list(self) -> list[Setting]:
        """List all settings."""
        return self.db.list_settings()

    @staticmethod
    def _key(key: SettingKey | str) -> str:
        if isinstance(key, SettingKey):
            return key.value
        if not key or not key.strip():
            raise errors.ValidationError("Setting key is required")
        return key.strip()
