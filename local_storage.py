import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Record keys
USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"


def plan_key(user_id: str) -> str:
    return f"plan_{user_id}"


def setup_habits_key(user_id: str) -> str:
    return f"setup_habits_{user_id}"


def tracking_key(user_id: str) -> str:
    return f"tracking_{user_id}"


class BaseStorage:
    """Key -> text storage, the same shape as browser localStorage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def set_items(self, items: Dict[str, str]) -> None:
        """Write several records together. Backends that can, do it in one write."""
        for key, value in items.items():
            self.set_item(key, value)

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemoryStorage(BaseStorage):
    """In-process dict storage, used by tests and STORAGE_BACKEND=memory"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def set_items(self, items: Dict[str, str]) -> None:
        self.items.update(items)

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self.items)


class LocalFileStorage(BaseStorage):
    """Simple local file storage: every record lives in one JSON object on disk"""

    def __init__(self, storage_file: str = 'challenge_data.json'):
        self.storage_file = storage_file
        self._lock = threading.Lock()
        self.items = self._load_items()

    def _load_items(self) -> Dict[str, str]:
        """Load records from the local JSON file"""
        if not os.path.exists(self.storage_file):
            return {}
        try:
            with open(self.storage_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.storage_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: top level is not an object", self.storage_file)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save_items(self, items: Dict[str, str]):
        """Write `items` to the local JSON file. Caller holds the lock."""
        directory = os.path.dirname(os.path.abspath(self.storage_file))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_file = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(items, f, indent=2, ensure_ascii=False)
            os.replace(tmp_file, self.storage_file)
        except (OSError, TypeError, ValueError):
            if os.path.exists(tmp_file):
                os.unlink(tmp_file)
            raise

    def _commit(self, items: Dict[str, str]):
        # memory only changes once the file write succeeded
        self._save_items(items)
        self.items = items

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def set_items(self, items: Dict[str, str]) -> None:
        with self._lock:
            updated = dict(self.items)
            updated.update(items)
            self._commit(updated)

    def remove_item(self, key: str) -> None:
        with self._lock:
            if key in self.items:
                updated = dict(self.items)
                del updated[key]
                self._commit(updated)

    def keys(self) -> List[str]:
        return list(self.items)


# -------------------------
# Typed JSON access
# -------------------------
def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def read_json(storage: BaseStorage, key: str) -> Any:
    """
    Return the decoded record stored under `key`, or None if it is
    missing or is not valid JSON.
    """
    raw = storage.get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Treating malformed record %r as absent: %s", key, e)
        return None


def write_json(storage: BaseStorage, key: str, value: Any) -> None:
    storage.set_item(key, dump_json(value))
