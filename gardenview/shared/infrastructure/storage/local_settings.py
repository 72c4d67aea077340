# 📄 File: gardenview/shared/infrastructure/storage/local_settings.py

# 🧭 Purpose (Layman Explanation):
# Keeps the user's preferences on this device (language, units, home location, chat
# panel position) so they are there immediately on the next start, even offline.

# 🧪 Purpose (Technical Summary):
# Synchronous JSON-file key-value store. Values are JSON-serializable objects;
# writes replace the file atomically. A missing or unreadable file reads as empty.

# 🔗 Dependencies:
# json, pathlib, os, typing

# 🔄 Connected Modules / Calls From:
# SettingsSync (settings object), session handlers (chat dock preferences)

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gardenview.shared.config.settings import Settings, get_settings
from gardenview.shared.core.exceptions import StorageError
from gardenview.shared.utils.logging import get_logger

logger = get_logger(__name__)


class LocalSettingsStore:
    """Device-local durable key-value storage."""

    def __init__(self, path: Optional[Union[str, Path]] = None, settings: Optional[Settings] = None):
        if path is None:
            path = (settings or get_settings()).LOCAL_STORAGE_PATH
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Local settings file unreadable, starting empty: {e}", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write local settings: {e}", operation="write", path=str(self.path))

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
