"""JSON file implementation of durable session storage."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from zanzibar_tours.services.session_store import SessionStorage

logger = logging.getLogger(__name__)


@dataclass
class JsonFileSessionStorage(SessionStorage):
    """Key-value storage persisted as a flat JSON object."""

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the stored value, treating unreadable files as empty."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value and flush the file."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        """Remove a key and flush the file."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("Could not read session file %s", self.path)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt session file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
