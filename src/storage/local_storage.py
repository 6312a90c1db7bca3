"""Browser-style key-value storage backed by a JSON file.

The portal keeps its registered users under a single key, the same way a
single-page app would keep them in ``localStorage``. Keys and values are both
strings; callers serialize their own data.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Key-value storage held in a dict. Nothing survives the process."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> List[str]:
        return list(self._items)


class LocalStorage(MemoryStorage):
    """Key-value storage persisted to a JSON file.

    The whole mapping is read once on construction and rewritten on every
    mutation. A missing or unreadable file starts empty; write errors are
    not caught.

    Args:
        path: JSON file holding the mapping. Defaults to
            ~/.student-portal/local_storage.json
    """

    def __init__(self, path: Path = Path("~/.student-portal/local_storage.json").expanduser()):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._read())

    def _read(self) -> Dict[str, str]:
        """Read the backing file, tolerating absence and corruption."""
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: expected an object")
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        self.path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._write()

    def remove_item(self, key: str) -> None:
        super().remove_item(key)
        self._write()

    def clear(self) -> None:
        super().clear()
        self._write()
