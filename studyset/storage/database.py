"""The shared behaviour of the key-value student stores."""

from __future__ import annotations

import dataclasses
import time
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from studyset.storage.records import Person, Record, RecordValue, parse_record


def _string_matches(value: str, mask: str) -> bool:
    return not mask or value == mask


def _number_matches(value: int, mask: int) -> bool:
    return mask < 0 or value == mask


def mask_matches(student: Person, mask: Person) -> bool:
    """Compare with a mask: empty strings and negative numbers match anything."""
    return (
        _string_matches(student.name, mask.name)
        and _string_matches(student.surname, mask.surname)
        and _string_matches(student.city, mask.city)
        and _number_matches(student.birth, mask.birth)
        and _number_matches(student.balance, mask.balance)
    )


def apply_mask(student: Person, mask: Person) -> Person:
    """Return ``student`` with every field the mask sets replaced."""
    return Person(
        name=mask.name or student.name,
        surname=mask.surname or student.surname,
        birth=mask.birth if mask.birth >= 0 else student.birth,
        city=mask.city or student.city,
        balance=mask.balance if mask.balance >= 0 else student.balance,
    )


def student_line(student: Person) -> str:
    """Format a student as ``surname name birth city balance``."""
    return f"{student.surname} {student.name} {student.birth} {student.city} {student.balance}"


def record_line(record: Record) -> str:
    """Format a record in the form that :func:`parse_record` reads."""
    return f"{record.key} {student_line(record.value.student)}"


def _now() -> int:
    return int(time.time())


class Database(ABC):
    """A store of student records with expiring keys.

    Subclasses supply the storage itself through a handful of primitives.
    """

    def __init__(self) -> None:
        self._key_live: list[tuple[str, int]] = []

    @abstractmethod
    def _find(self, key: str) -> Record | None:
        """Return the stored record for ``key``."""

    @abstractmethod
    def _insert(self, record: Record) -> bool:
        """Store ``record`` unless its key is taken."""

    @abstractmethod
    def _remove(self, key: str) -> bool:
        """Drop the record for ``key``."""

    @abstractmethod
    def _records(self) -> Iterator[Record]:
        """Yield every stored record in storage order."""

    @abstractmethod
    def _clear_storage(self) -> None:
        """Drop every stored record."""

    def _add_life_key(self, record: Record) -> None:
        if record.value.death_time != -1:
            deadline = record.value.create_time + record.value.death_time
            self._key_live.append((record.key, deadline))
        self._update_storage()

    def _update_storage(self) -> None:
        now = _now()
        alive = []
        for key, deadline in self._key_live:
            if deadline < now:
                self._remove(key)
            else:
                alive.append((key, deadline))
        self._key_live = alive

    def set(self, record: Record) -> bool:
        """Add a record; False if the key already exists."""
        self._update_storage()
        if not self._insert(record):
            return False
        self._add_life_key(record)
        return True

    def get(self, key: str) -> Person | None:
        """Return the student stored under ``key``."""
        self._update_storage()
        record = self._find(key)
        return record.value.student if record else None

    def exists(self, key: str) -> bool:
        """Tell whether ``key`` is stored."""
        self._update_storage()
        return self._find(key) is not None

    def delete(self, key: str) -> bool:
        """Remove ``key``; False if it was absent."""
        self._update_storage()
        return self._remove(key)

    def update(self, record: Record) -> bool:
        """Overwrite the fields the record's student sets; False if the key is absent."""
        self._update_storage()
        stored = self._find(record.key)
        if stored is None:
            return False
        stored.value.student = apply_mask(stored.value.student, record.value.student)
        return True

    def keys(self) -> list[str]:
        """Return every key in storage order."""
        self._update_storage()
        return [record.key for record in self._records()]

    def rename(self, old_key: str, new_key: str) -> bool:
        """Move a record to a free key."""
        self._update_storage()
        source = self._find(old_key)
        if source is None or self._find(new_key) is not None:
            return False
        moved = Record(
            new_key,
            RecordValue(
                dataclasses.replace(source.value.student),
                source.value.create_time,
                source.value.death_time,
            ),
        )
        self._remove(old_key)
        self.set(moved)
        return True

    def ttl(self, key: str) -> int:
        """Seconds left to live, or -1 when the key is absent."""
        self._update_storage()
        record = self._find(key)
        if record is None:
            return -1
        return record.value.death_time - (_now() - record.value.create_time)

    def find(self, mask: Person) -> list[str]:
        """Return the keys whose students match ``mask``."""
        self._update_storage()
        return [r.key for r in self._records() if mask_matches(r.value.student, mask)]

    def show_all(self) -> list[Record]:
        """Return every record in storage order."""
        self._update_storage()
        return list(self._records())

    def export(self, path: str | Path) -> int:
        """Write every record to ``path``, one per line; return the count."""
        self._update_storage()
        count = 0
        with open(path, "w", encoding="utf-8") as file:
            for record in self._records():
                file.write(record_line(record) + "\n")
                count += 1
        return count

    def clear(self) -> None:
        """Drop every record."""
        self._clear_storage()
        self._key_live.clear()

    def upload(self, path: str | Path) -> int:
        """Replace the contents with the records of ``path``; return how many were added."""
        try:
            file = open(path, encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"file do not exist: {path}") from None
        with file:
            self.clear()
            added = 0
            for line in file:
                record = parse_record(line.rstrip("\n"))
                if record is not None and record.key:
                    added += self.set(record)
        return added