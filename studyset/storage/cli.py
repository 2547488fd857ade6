"""An interactive shell over the hash-table and AVL student stores."""

from __future__ import annotations

import random
import re
import sys
import time
from collections.abc import Callable, Iterable, Sequence
from typing import TextIO

from studyset.storage.avl import AVLTree
from studyset.storage.database import Database, student_line
from studyset.storage.hash_table import HashTable
from studyset.storage.records import (
    Person,
    Record,
    RecordValue,
    colorize,
    num_check,
)

BLACK = "Black"
RED = "Red"
GREEN = "Green"
WHITE = "White"
LIGHT_RED = "Light Red"

_CLEAR_SCREEN = "\033[H\033[2J"
_WIDTH = 103
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")

_TITLE = "TRANSACTIONS".center(_WIDTH + 2)

_MENU_ROWS = [
    "Please choose type of container".center(_WIDTH),
    "  1. Hash table",
    "  2. Binary search trees",
    "  3. Exit",
    "  4. Research",
]

_HELP_ROWS = [
    ("SET <key> <surname> <name> <year> <city> <coins> EX <life time>", "Add element"),
    ("GET <key>", "Get the value associated with the key"),
    ("EXISTS <key>", "Check if object exist"),
    ("DEL <key>", "Delete the record"),
    ("UPDATE <key> <surname> <name> <year> <city> <coins> *", "Update elements data"),
    ("KEYS", "Get all the keys"),
    ("RENAME <old key> <new key>", "Rename key"),
    ("TTL <key>", "Show elements life time"),
    ("FIND <surname> <name> <year> <city> <coins> *", "Find element"),
    ("SHOWALL", "Get all records"),
    ("UPLOAD <file path>", "Upload data from a file"),
    ("EXPORT <file path>", "Save the data to file"),
    ("CLEAR", "Clear storage"),
    ("STORAGE", "Change storage"),
    ("HELP", "Get help"),
    ("EXIT", "Enter to exit the program"),
]

SET_USAGE = "usage: SET <key> <surname> <name> <year> <city> <coins> EX <life time>"
UPDATE_USAGE = "usage: UPDATE <key> <surname> <name> <year> <city> <coins>"
FIND_USAGE = "usage: FIND <surname> <name> <year> <city> <coins>"
SHOWALL_HEADER = "№ | Last name |   First name   | Year |  City   | Number of coins |"
WRONG_COUNT = "ERROR: incorrect number of parameters"
NO_PARAMETERS = "ERROR: сommand must be without parameters"


def _box(rows: Iterable[str]) -> list[str]:
    lines = ["╔" + "═" * _WIDTH + "╗"]
    lines.extend("║" + row.ljust(_WIDTH) + "║" for row in rows)
    lines.append("╚" + "═" * _WIDTH + "╝")
    return lines


def _help_rows() -> list[str]:
    rows = ["HELP".center(_WIDTH)]
    for left, right in _HELP_ROWS:
        rows.append(f"  {left}".ljust(_WIDTH - len(right) - 2) + right + "  ")
    rows.append("")
    rows.append("  *If you want to skip the field use a dash '-'")
    return rows


MENU_TABLE = _box(_MENU_ROWS)
HELP_TABLE = _box(_help_rows())


def _split(text: str) -> list[str]:
    """Split on single spaces, dropping the empty field after a trailing space."""
    if not text:
        return []
    parts = text.split(" ")
    if text.endswith(" "):
        parts.pop()
    return parts


def _convert_input(text: str) -> int:
    """Read a non-negative integer or -1; anything else gives 0."""
    if text == "-1":
        return -1
    if num_check(text):
        match = _INT_PREFIX.match(text)
        if match:
            return int(match.group(1))
    return 0


def _mask_dashes(tokens: list[str], first_num: int, last_num: int) -> list[str]:
    """Replace '-' placeholders: numbers become -1, strings become empty."""
    result = list(tokens)
    for index in range(last_num + 1):
        if result[index] == "-":
            result[index] = "-1" if index in (first_num, last_num) else ""
    return result


def _number_or_dash(text: str) -> bool:
    return text == "-" or num_check(text)


def random_record(rng: random.Random) -> Record:
    """Create a record with random key and fields that never expires."""
    key = str(rng.randint(0, 100000))
    surname = str(rng.randint(0, 1000))
    name = str(rng.randint(0, 100))
    year = rng.randint(1900, 2022)
    city = str(rng.randint(0, 100))
    coins = rng.randint(0, 1000)
    student = Person(name=name, surname=surname, birth=year, city=city, balance=coins)
    return Record(key, RecordValue(student, int(time.time()), -1))


def _timed(action: Callable[[], object]) -> float:
    begin = time.process_time()
    action()
    return time.process_time() - begin


def benchmark(storage: Database, repeats: int, rng: random.Random) -> dict[str, float]:
    """Average CPU seconds per operation over ``repeats`` runs of each."""
    if repeats <= 0:
        raise ValueError("repeats must be positive")

    def do_set() -> None:
        for _ in range(repeats):
            storage.set(random_record(rng))

    def do_get() -> None:
        for _ in range(repeats):
            storage.get(str(rng.randint(0, 100000)))

    def do_delete() -> None:
        for _ in range(repeats):
            storage.delete(str(rng.randint(0, 100000)))

    def do_show_all() -> None:
        for _ in range(repeats):
            storage.show_all()

    def do_find() -> None:
        mask = Person(name="-", surname="-", birth=-1, city="-", balance=-1)
        for _ in range(repeats):
            storage.find(mask)

    timings = {
        "Set": _timed(do_set),
        "Get": _timed(do_get),
        "Delete": _timed(do_delete),
        "Show all": _timed(do_show_all),
        "Find": _timed(do_find),
    }
    return {name: total / repeats for name, total in timings.items()}


class Shell:
    """Reads commands line by line and runs them against the chosen store."""

    def __init__(self, output: TextIO | None = None, rng: random.Random | None = None) -> None:
        self.output = sys.stdout if output is None else output
        self.rng = rng if rng is not None else random.Random()
        self._stores: dict[int, Database] = {1: HashTable(), 2: AVLTree()}
        self.storage: Database | None = None
        self.finished = False
        self._choosing = True
        self._refresh = True
        self._lines = iter(())
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "SET": self._add,
            "GET": self._get,
            "EXISTS": self._exists,
            "DEL": self._delete,
            "UPDATE": self._update,
            "KEYS": self._keys,
            "RENAME": self._rename,
            "TTL": self._ttl,
            "FIND": self._find,
            "SHOWALL": self._show_all,
            "UPLOAD": self._upload,
            "EXPORT": self._export,
            "CLEAR": self._clear,
        }

    # output helpers

    def _say(self, text: str) -> None:
        print(text, file=self.output)

    def _result(self, text: str) -> None:
        self._say(colorize(text, WHITE, BLACK))

    def _error(self, text: str) -> None:
        self._say(colorize(text, BLACK, RED))

    def _ok(self, text: str = " OK ") -> None:
        self._say(colorize(text, BLACK, GREEN))

    def _print_table(self, table: list[str]) -> None:
        self.output.write(_CLEAR_SCREEN)
        self._say(colorize(_TITLE, RED, WHITE, "Bold"))
        for row in table:
            self._say(colorize(row, LIGHT_RED, WHITE))

    def _read(self) -> str:
        try:
            return next(self._lines)
        except StopIteration:
            raise EOFError("input exhausted") from None

    # driving

    def choose_storage(self, choice: str | int) -> bool:
        """Act on a menu choice; False if it is not one of 1 to 4."""
        number = _convert_input(choice) if isinstance(choice, str) else choice
        if number == 1:
            self.storage = self._stores[1]
            self._choosing = False
            self._ok("Hash table storage was set")
        elif number == 2:
            self.storage = self._stores[2]
            self._choosing = False
            self._ok("AVL storage was set")
        elif number == 3:
            self.finished = True
            self._say(colorize("          Programm Exit          ", LIGHT_RED, WHITE))
        elif number == 4:
            self.finished = True
            self._say(colorize("          Start Research         ", LIGHT_RED, WHITE))
            self._research()
        else:
            self._error("Error, incorrect choose. Try again.")
            return False
        return True

    def execute(self, line: str) -> None:
        """Run one command line against the chosen store."""
        if line in ("EXIT", "exit"):
            self.finished = True
            return
        if line in ("HELP", "help"):
            self._refresh = True
            return
        command = line.split(" ", 1)[0].upper()
        if command == "STORAGE":
            self._choosing = True
            self._print_table(MENU_TABLE)
            return
        handler = self._commands.get(command)
        if handler is None:
            self._error("ERROR: invalid command")
            return
        if self.storage is None:
            raise RuntimeError("choose a storage first")
        handler(_split(line))

    def run(self, lines: Iterable[str]) -> None:
        """Show the menu and process ``lines`` until EXIT or the input ends."""
        self._lines = iter(lines)
        self._choosing = True
        self._print_table(MENU_TABLE)
        try:
            while not self.finished:
                if self._choosing:
                    self.choose_storage(self._read())
                    continue
                if self._refresh:
                    self._print_table(HELP_TABLE)
                    self._refresh = False
                self.execute(self._read())
        except EOFError:
            pass

    # commands

    def _add(self, tokens: list[str]) -> None:
        correct = True
        if len(tokens) not in (7, 9):
            self._error(WRONG_COUNT)
            correct = False
        elif len(tokens) == 9 and tokens[7] != "EX":
            self._error("ERROR: add 'EX' before <life time> parametr")
            correct = False
        elif len(tokens) == 9 and not num_check(tokens[8]):
            correct = False
        elif num_check(tokens[4]) and num_check(tokens[6]):
            student = Person(
                name=tokens[3],
                surname=tokens[2],
                birth=_convert_input(tokens[4]),
                city=tokens[5],
                balance=_convert_input(tokens[6]),
            )
            life = _convert_input(tokens[8]) if len(tokens) == 9 else -1
            record = Record(tokens[1], RecordValue(student, int(time.time()), life))
            if self.storage.set(record):
                self._ok()
            else:
                self._error("ERROR: such a key already exists")
        else:
            correct = False
        if not correct:
            self._result(SET_USAGE)

    def _get(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: GET <key>")
            return
        student = self.storage.get(tokens[1])
        self._result(student_line(student) if student else "(null)")

    def _exists(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: EXISTS <key>")
            return
        self._result("true" if self.storage.exists(tokens[1]) else "false")

    def _delete(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: DEL <key>")
            return
        self._result("true" if self.storage.delete(tokens[1]) else "false")

    def _update(self, tokens: list[str]) -> None:
        if len(tokens) != 7:
            self._error(WRONG_COUNT)
            self._result(UPDATE_USAGE)
            return
        if not (_number_or_dash(tokens[4]) and _number_or_dash(tokens[6])):
            self._result(UPDATE_USAGE)
            return
        tokens = _mask_dashes(tokens, 4, 6)
        student = Person(
            name=tokens[3],
            surname=tokens[2],
            birth=_convert_input(tokens[4]),
            city=tokens[5],
            balance=_convert_input(tokens[6]),
        )
        if self.storage.update(Record(tokens[1], RecordValue(student, -1, -1))):
            self._ok()
        else:
            self._error("ERROR: such a key doesn't exists")

    def _keys(self, tokens: list[str]) -> None:
        if len(tokens) != 1:
            self._error(NO_PARAMETERS)
            self._result("usage: KEYS")
            return
        keys = self.storage.keys()
        if not keys:
            self._result("Empty")
        for number, key in enumerate(keys, start=1):
            self._result(f"{number}) {key}")

    def _rename(self, tokens: list[str]) -> None:
        if len(tokens) != 3:
            self._error(WRONG_COUNT)
            self._result("usage: RENAME <old key> <new key>")
            return
        self._result("OK" if self.storage.rename(tokens[1], tokens[2]) else "Error")

    def _ttl(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: TTL <key>")
            return
        left = self.storage.ttl(tokens[1])
        self._result(str(left) if left > -1 else "(null)")

    def _find(self, tokens: list[str]) -> None:
        if len(tokens) != 6:
            self._error(WRONG_COUNT)
            self._result(FIND_USAGE)
            return
        if not (_number_or_dash(tokens[3]) and _number_or_dash(tokens[5])):
            self._result(FIND_USAGE)
            return
        tokens = _mask_dashes(tokens, 3, 5)
        mask = Person(
            name=tokens[2],
            surname=tokens[1],
            birth=_convert_input(tokens[3]),
            city=tokens[4],
            balance=_convert_input(tokens[5]),
        )
        keys = self.storage.find(mask)
        if not keys:
            self._result("(null)")
        for number, key in enumerate(keys, start=1):
            self._result(f"{number}) {key}")

    def _show_all(self, tokens: list[str]) -> None:
        if len(tokens) != 1:
            self._error(NO_PARAMETERS)
            self._result("usage: SHOWALL")
            return
        self._result(SHOWALL_HEADER)
        records = self.storage.show_all()
        if not records:
            self._result("Empty")
        for number, record in enumerate(records, start=1):
            self._result(f"{number}) {student_line(record.value.student)}")

    def _upload(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: UPLOAD <file path>")
            return
        try:
            count = self.storage.upload(tokens[1])
        except (OSError, ValueError):
            self._error("ERROR: bad file")
            return
        self._ok(f"OK {count}")

    def _export(self, tokens: list[str]) -> None:
        if len(tokens) != 2:
            self._error(WRONG_COUNT)
            self._result("usage: EXPORT <file path>")
            return
        try:
            count = self.storage.export(tokens[1])
        except OSError:
            self._error("ERROR: bad file")
            return
        self._ok(f"OK {count}")

    def _clear(self, tokens: list[str]) -> None:
        self.storage.clear()
        self._ok("Storage was cleared")

    # research

    def _read_positive(self) -> int:
        tokens = _split(self._read())
        if len(tokens) != 1:
            return 0
        return _convert_input(tokens[0])

    def _research(self) -> None:
        hash_table = HashTable()
        tree = AVLTree()
        self._say("Enter the number of items to generate: ")
        generated = self._read_positive()
        if generated <= 0:
            self._error("ERROR: incorrect input")
            return
        self._say("Enter the number of repetitions of one action: ")
        repeats = self._read_positive()
        if repeats <= 0:
            self._error("ERROR: incorrect input")
            return
        for storage in (hash_table, tree):
            for _ in range(generated):
                storage.set(random_record(self.rng))
        for title, storage in (
            ("          Start Hash-table test          ", hash_table),
            ("           Start AVL tree test           ", tree),
        ):
            self._ok(title)
            averages = benchmark(storage, repeats, self.rng)
            self._say(f"Average time Set, sec:       {averages['Set']:.6f}")
            self._say(f"Average time Get, sec:       {averages['Get']:.6f}")
            self._say(f"Average time Delete, sec:    {averages['Delete']:.6f}")
            self._say(f"Average time Show all, sec:  {averages['Show all']:.6f}")
            self._say(f"Average time Find, sec:      {averages['Find']:.6f}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell on standard input."""
    shell = Shell()
    shell.run(line.rstrip("\r\n") for line in sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())