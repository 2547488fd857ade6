"""A student store kept in a fixed number of hash buckets."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import chain
from pathlib import Path

from studyset.storage.database import Database
from studyset.storage.records import Person, Record

DEFAULT_SIZE = 10000

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _fnv1a(text: str) -> int:
    """A stable 64-bit hash, so storage order does not change between runs."""
    value = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        value = ((value ^ byte) * _FNV_PRIME) & _MASK64
    return value


class HashTable(Database):
    """Records spread over buckets by the hash of their key."""

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size < 1:
            raise ValueError("a hash table needs at least one bucket")
        super().__init__()
        self._buckets: list[list[Record]] = [[] for _ in range(size)]

    def _bucket(self, key: str) -> list[Record]:
        return self._buckets[_fnv1a(key) % len(self._buckets)]

    def _find(self, key: str) -> Record | None:
        return next((r for r in self._bucket(key) if r.key == key), None)

    def _insert(self, record: Record) -> bool:
        if self._find(record.key) is not None:
            return False
        self._bucket(record.key).append(record)
        return True

    def _remove(self, key: str) -> bool:
        bucket = self._bucket(key)
        for index, record in enumerate(bucket):
            if record.key == key:
                del bucket[index]
                return True
        return False

    def _records(self) -> Iterator[Record]:
        return chain.from_iterable(self._buckets)

    def _clear_storage(self) -> None:
        for bucket in self._buckets:
            bucket.clear()

    def set(self, record: Record) -> bool:
        """Add a record; False if the key already exists."""
        return super().set(record)

    def get(self, key: str) -> Person | None:
        """Return the student stored under ``key``."""
        return super().get(key)

    def exists(self, key: str) -> bool:
        """Tell whether ``key`` is stored."""
        return super().exists(key)

    def delete(self, key: str) -> bool:
        """Remove ``key``; False if it was absent."""
        return super().delete(key)

    def update(self, record: Record) -> bool:
        """Overwrite the fields the record's student sets."""
        return super().update(record)

    def keys(self) -> list[str]:
        """Return every key, bucket by bucket."""
        return super().keys()

    def rename(self, old_key: str, new_key: str) -> bool:
        """Move a record to a free key."""
        return super().rename(old_key, new_key)

    def ttl(self, key: str) -> int:
        """Seconds left to live, or -1 when the key is absent."""
        return super().ttl(key)

    def find(self, mask: Person) -> list[str]:
        """Return the keys whose students match ``mask``."""
        return super().find(mask)

    def show_all(self) -> list[Record]:
        """Return every record, bucket by bucket."""
        return super().show_all()

    def export(self, path: str | Path) -> int:
        """Write every record to ``path``; return the count."""
        return super().export(path)

    def clear(self) -> None:
        """Drop every record."""
        super().clear()