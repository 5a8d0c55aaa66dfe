from typing import Dict, Optional, Protocol

from models.storage_entry import StorageEntry


class KeyValueStorage(Protocol):
    # Synchronous string store the vault persists its collections into

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        # Plain dict, nothing survives the process
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self):
        return list(self._data)


class SQLAlchemyStorage:
    """Adapter from the storage port onto the `storage_entries` table.

    Must be used inside a Flask app context. Writes replace the whole row, so
    two processes writing the same key race and the last commit wins.
    """

    def get(self, key: str) -> Optional[str]:
        return StorageEntry.read(key)

    def set(self, key: str, value: str) -> None:
        StorageEntry.write(key, value)
