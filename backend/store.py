"""
Key-value stores backing the response cache.

Both stores speak plain strings, like browser localStorage: the cache
serialises entries itself. MemoryStore lives as long as the process;
FileStore keeps one JSON file per key under a directory and survives
restarts.
"""

import hashlib
import os
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self):
        self.items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileStore:
    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        # Keys are free text (exercise names); hash them into safe filenames
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return os.path.join(self.directory, f"{digest}.json")

    def get_item(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp = f"{path}.{os.getpid()}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        # Atomic on POSIX; concurrent writers of one key: last write wins
        os.replace(tmp, path)

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
