"""Student records, their one-line text form and terminal colouring."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field

FIELD_COUNT = 6

FOREGROUND = {
    "Default": "39", "Black": "30", "Red": "31", "Green": "32",
    "Yellow": "33", "Blue": "34", "Magenta": "35", "Cyan": "36",
    "Light Gray": "37", "Dark Gray": "90", "Light Red": "91",
    "Light Green": "92", "Light Yellow": "93", "Light Blue": "94",
    "Light Magenta": "95", "Light Cyan": "96", "White": "97",
}

BACKGROUND = {
    "Default": "49", "Black": "40", "Red": "41", "Green": "42",
    "Yellow": "43", "Blue": "44", "Megenta": "45", "Cyan": "46",
    "Light Gray": "47", "Dark Gray": "100", "Light Red": "101",
    "Light Green": "102", "Light Yellow": "103", "Light Blue": "104",
    "Light Magenta": "105", "Light Cyan": "106", "White": "107",
}

FORMATTING_SET = {
    "Default": "0", "Bold": "1", "Dim": "2", "Underlined": "4",
    "Blink": "5", "Reverse": "7", "Hidden": "8",
}

FORMATTING_RESET = {
    "All": "0", "Bold": "21", "Dim": "22", "Underlined": "24",
    "Blink": "25", "Reverse": "27", "Hidden": "28",
}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class RecordFormatError(ValueError):
    """A line of a records file does not describe a record."""


@dataclass
class Person:
    """The student part of a record."""

    name: str = ""
    surname: str = ""
    birth: int = 0
    city: str = ""
    balance: int = 0


@dataclass
class RecordValue:
    """A student together with its lifetime metadata."""

    student: Person = field(default_factory=Person)
    create_time: int = 0
    death_time: int = -1


@dataclass
class Record:
    """A keyed entry of the database."""

    key: str
    value: RecordValue = field(default_factory=RecordValue)


def _stoi(text: str) -> int:
    """Read a leading 32-bit integer the way a lenient C parser does."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range in {text!r}")
    return value


def _split_spaces(text: str) -> list[str]:
    """Split on single spaces, dropping the empty field after a trailing space."""
    if not text:
        return []
    parts = text.split(" ")
    if text.endswith(" "):
        parts.pop()
    return parts


def num_check(line: str) -> bool:
    """Tell whether ``line`` starts with a non-negative integer."""
    try:
        return _stoi(line) >= 0
    except ValueError:
        print(f'ERROR: unable to cast value "{line}" to type int')
        return False


def colorize(
    source: str,
    foreground: str = "Default",
    background: str = "Default",
    formatting: str = "Default",
    reset: str = "All",
) -> str:
    """Wrap ``source`` in ANSI escape codes; unknown names fall back to defaults."""
    fg = FOREGROUND.get(foreground, FOREGROUND["Default"])
    bg = BACKGROUND.get(background, BACKGROUND["Default"])
    fmt = FORMATTING_SET.get(formatting, FORMATTING_SET["Default"])
    rst = FORMATTING_RESET.get(reset, FORMATTING_RESET["All"])
    return f"\033[{fmt};{bg};{fg}m{source}\033[{rst}m"


def print_result(text: str) -> None:
    """Print a result line in white on black."""
    print(colorize(text, "White", "Black"))


def parse_record(line: str) -> Record | None:
    """Parse ``key surname name birth city balance``; an empty line gives None."""
    if not line:
        return None
    parts = _split_spaces(line)
    if len(parts) < FIELD_COUNT:
        raise RecordFormatError(f'ERROR: wrong arguments in the line: "{line}"')
    birth_ok = num_check(parts[3])
    balance_ok = num_check(parts[5])
    if not (birth_ok and balance_ok):
        raise RecordFormatError(f'ERROR: wrong arguments in the line: "{line}"')
    key, surname, name, birth, city, balance = parts[:FIELD_COUNT]
    student = Person(
        name=name,
        surname=surname,
        birth=_stoi(birth),
        city=city,
        balance=_stoi(balance),
    )
    return Record(key, RecordValue(student, create_time=int(time.time()), death_time=-1))