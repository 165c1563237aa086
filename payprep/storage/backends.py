"""
Key-value backends for persisted state.

Values are JSON text. JsonFileStore keeps one file per key under a data
directory; MemoryStore is the in-process equivalent used by tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Protocol
from urllib.parse import quote, unquote


class KeyValueStore(Protocol):
    """String-keyed, string-valued store."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self) -> Iterator[str]:
        ...


class MemoryStore:
    """Dictionary-backed store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStore:
    """
    One file per key.

    Keys are percent-encoded into file names ({quoted key}.json), so any key
    round-trips through keys().
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{quote(key, safe='')}{self.SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        tmp.replace(path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> Iterator[str]:
        for path in sorted(self.data_dir.glob(f"*{self.SUFFIX}")):
            yield unquote(path.name[: -len(self.SUFFIX)])
