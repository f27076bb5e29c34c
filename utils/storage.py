"""File-backed key-value store standing in for browser local storage.

Each key is stored as a single JSON file holding a string value, so the
store mirrors the ``getItem`` / ``setItem`` / ``removeItem`` contract the
dashboard expects.
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """Persistent string values under fixed keys.

    Usage::

        store = LocalStore(Path(".dashboard_store"))
        store.set_item("isAuthenticated", "true")
        store.get_item("isAuthenticated")   # "true"
        store.remove_item("isAuthenticated")
    """

    def __init__(self, root_dir: Path):
        """Initialize the store.

        Args:
            root_dir: Directory holding one file per key (created if missing)
        """
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, key: str) -> Path:
        """Get the file path backing a key.

        Args:
            key: Store key

        Returns:
            Path to the key's file
        """
        # Sanitize key to be filesystem-safe
        safe_key = "".join(c if c.isalnum() or c in '._-' else '_' for c in key)
        return self.root_dir / f"{safe_key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value for *key*, or ``None`` if absent.

        An entry that cannot be decoded to a string is deleted and reads as
        absent.
        """
        path = self._get_path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Removing unreadable store entry %s: %s", path, e)
            self.remove_item(key)
            return None
        except OSError as e:
            logger.warning("Failed to read store entry %s: %s", path, e)
            return None
        if not isinstance(value, str):
            logger.warning("Removing non-string store entry %s", path)
            self.remove_item(key)
            return None
        return value

    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, overwriting any previous value."""
        path = self._get_path(key)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(value, f)
        except OSError as e:
            logger.warning("Failed to write store entry %s: %s", path, e)

    def remove_item(self, key: str) -> None:
        """Delete *key* (no-op if not present)."""
        try:
            self._get_path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove store entry %s: %s", key, e)

    def keys(self) -> list[str]:
        """Return the (sanitized) keys currently present."""
        return sorted(p.stem for p in self.root_dir.glob("*.json"))
