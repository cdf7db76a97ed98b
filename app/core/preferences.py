"""Device-local key/value preferences stored in a JSON file."""

import json
from pathlib import Path
from typing import Optional

from app.config import settings
from app.core.logging import logger


USER_NAME_KEY = "medication_calendar_user_name"


class LocalPreferences:
    """A single JSON file of string values, scoped to this device."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.PREFERENCES_PATH).expanduser()

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get_user_name(self) -> Optional[str]:
        return self.get(USER_NAME_KEY)

    def save_user_name(self, name: str) -> bool:
        """Store a trimmed display name. Blank names are ignored."""
        name = name.strip()
        if not name:
            return False
        self.set(USER_NAME_KEY, name)
        logger.info(f"Saved display name '{name}'")
        return True
