"""A student store kept in a self-balancing binary search tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from studyset.storage.database import Database
from studyset.storage.records import Person, Record

_NULL_STYLE = " [color=black, style=filled, fontsize=2]"


@dataclass
class _Node:
    record: Record
    left: _Node | None = None
    right: _Node | None = None
    height: int = 1

    @property
    def key(self) -> str:
        return self.record.key


def _height(node: _Node | None) -> int:
    return node.height if node else 0


def _fix_height(node: _Node) -> None:
    node.height = max(_height(node.left), _height(node.right)) + 1


def _bfactor(node: _Node) -> int:
    return _height(node.right) - _height(node.left)


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    node.left = pivot.right
    pivot.right = node
    _fix_height(node)
    _fix_height(pivot)
    return pivot


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    node.right = pivot.left
    pivot.left = node
    _fix_height(node)
    _fix_height(pivot)
    return pivot


def _balance(node: _Node) -> _Node:
    _fix_height(node)
    if _bfactor(node) == 2:
        if _bfactor(node.right) < 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    if _bfactor(node) == -2:
        if _bfactor(node.left) > 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    return node


def _postorder(node: _Node | None) -> Iterator[_Node]:
    if node:
        yield from _postorder(node.left)
        yield from _postorder(node.right)
        yield node


class AVLTree(Database):
    """Records ordered by key in an AVL tree; traversal is post-order."""

    def __init__(self) -> None:
        super().__init__()
        self._root: _Node | None = None

    def _find(self, key: str) -> Record | None:
        node = self._root
        while node:
            if key < node.key:
                node = node.left
            elif key > node.key:
                node = node.right
            else:
                return node.record
        return None

    def _insert(self, record: Record) -> bool:
        self._root, inserted = self._insert_at(self._root, record)
        return inserted

    def _insert_at(self, node: _Node | None, record: Record) -> tuple[_Node, bool]:
        if node is None:
            return _Node(record), True
        if record.key < node.key:
            node.left, inserted = self._insert_at(node.left, record)
        elif record.key > node.key:
            node.right, inserted = self._insert_at(node.right, record)
        else:
            return node, False
        return (_balance(node) if inserted else node), inserted

    def _remove(self, key: str) -> bool:
        self._root, removed = self._remove_at(self._root, key)
        return removed

    def _remove_at(self, node: _Node | None, key: str) -> tuple[_Node | None, bool]:
        if node is None:
            return None, False
        if key < node.key:
            node.left, removed = self._remove_at(node.left, key)
        elif key > node.key:
            node.right, removed = self._remove_at(node.right, key)
        else:
            if node.right is None:
                return node.left, True
            successor = node.right
            while successor.left:
                successor = successor.left
            node.record = successor.record
            node.right, removed = self._remove_at(node.right, successor.key)
        return _balance(node), removed

    def _records(self) -> Iterator[Record]:
        return (node.record for node in _postorder(self._root))

    def _clear_storage(self) -> None:
        self._root = None

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
        """Return every key in post-order."""
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
        """Return every record in post-order."""
        return super().show_all()

    def export(self, path: str | Path) -> int:
        """Write every record to ``path``; return the count."""
        return super().export(path)

    def clear(self) -> None:
        """Drop every record."""
        super().clear()

    def export_dot(self, name: str | Path) -> bool:
        """Write the tree's shape as a graphviz digraph to ``name`` + ``.dot``."""
        lines = ["digraph { node [margin=0 fontsize=8 width=0 shape=circle]\n"]
        for node in _postorder(self._root):
            key = node.key
            if node.left:
                lines.append(
                    f'\t{key} -> {node.left.key}[label="{key}h= {node.left.height}"'
                    ", fontsize=6]\n"
                )
            else:
                lines.append(f"l_{key}{_NULL_STYLE}\n")
                lines.append(f"\t{key} -> l_{key}\n")
            if node.right:
                lines.append(
                    f"\t{key} -> {node.right.key}[color=blue, "
                    f'label="{key}h= {node.right.height}", fontsize=6]\n'
                )
            else:
                lines.append(f"r_{key}{_NULL_STYLE}\n")
                lines.append(f"\t{key} -> r_{key}\n")
        lines.append("}")
        try:
            with open(f"{name}.dot", "w", encoding="utf-8") as file:
                file.writelines(lines)
        except OSError:
            return False
        return True

    def is_balanced(self) -> bool:
        """Check every node's height and the balance of its children."""
        for node in _postorder(self._root):
            unbalanced = (
                node.left
                and node.right
                and abs(node.left.height - node.right.height) > 1
            )
            wrong_height = node.height != max(_height(node.left), _height(node.right)) + 1
            if unbalanced or wrong_height:
                print(f"Disbalance in tree, node {node.key}")
                return False
        return True