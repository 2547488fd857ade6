import random
import time

import pytest

from studyset.storage.avl import AVLTree
from studyset.storage.records import Person, Record, RecordValue


def make(key, surname="Ivanov", name="Ivan", birth=2000, city="Kazan",
         balance=10, create_time=None, death_time=-1):
    created = int(time.time()) if create_time is None else create_time
    return Record(key, RecordValue(Person(name, surname, birth, city, balance),
                                   created, death_time))


HEADER = "digraph { node [margin=0 fontsize=8 width=0 shape=circle]\n"


def test_set_get_and_duplicate():
    tree = AVLTree()
    assert tree.set(make("k1", name="Anna"))
    assert not tree.set(make("k1", name="Other"))
    assert tree.get("k1").name == "Anna"
    assert tree.get("absent") is None


def test_postorder_keys():
    tree = AVLTree()
    for key in ["a", "b", "c"]:
        tree.set(make(key))
    assert tree.keys() == ["a", "c", "b"]


def test_sorted_inserts_stay_balanced():
    tree = AVLTree()
    keys = [f"{i:04d}" for i in range(200)]
    for key in keys:
        assert tree.set(make(key))
    assert tree.is_balanced()
    assert sorted(tree.keys()) == keys


def test_deletes_keep_balance_and_content():
    tree = AVLTree()
    rng = random.Random(7)
    keys = [f"{i:04d}" for i in range(150)]
    rng.shuffle(keys)
    for key in keys:
        tree.set(make(key))
    removed = set(keys[:75])
    for key in keys[:75]:
        assert tree.delete(key)
        assert tree.is_balanced()
    assert set(tree.keys()) == set(keys) - removed
    assert not any(tree.exists(k) for k in removed)
    assert not tree.delete(keys[0])


def test_delete_root_and_only_node():
    tree = AVLTree()
    tree.set(make("x"))
    assert tree.delete("x")
    assert tree.keys() == []
    assert tree.is_balanced()


def test_update_applies_mask():
    tree = AVLTree()
    tree.set(make("k1"))
    assert tree.update(make("k1", name="", surname="Petrov", birth=-1, city="", balance=42))
    student = tree.get("k1")
    assert student.surname == "Petrov"
    assert student.balance == 42
    assert student.name == "Ivan"
    assert not tree.update(make("absent"))


def test_rename():
    tree = AVLTree()
    tree.set(make("old", name="Petr"))
    tree.set(make("taken"))
    assert not tree.rename("old", "taken")
    assert not tree.rename("absent", "new")
    assert tree.rename("old", "new")
    assert not tree.exists("old")
    assert tree.get("new").name == "Petr"
    assert tree.is_balanced()


def test_ttl_and_expiry():
    tree = AVLTree()
    tree.set(make("short", death_time=100))
    tree.set(make("gone", create_time=int(time.time()) - 10, death_time=5))
    assert 0 < tree.ttl("short") <= 100
    assert tree.ttl("gone") == -1
    assert not tree.exists("gone")


def test_find():
    tree = AVLTree()
    tree.set(make("a", birth=1990))
    tree.set(make("b", birth=2001))
    tree.set(make("c", birth=1990))
    mask = Person(name="", surname="", birth=1990, city="", balance=-1)
    assert sorted(tree.find(mask)) == ["a", "c"]


def test_export_upload_round_trip(tmp_path):
    tree = AVLTree()
    for key in ["m", "a", "z"]:
        tree.set(make(key, name=key.upper()))
    path = tmp_path / "db.txt"
    assert tree.export(path) == 3
    other = AVLTree()
    assert other.upload(path) == 3
    assert sorted(other.keys()) == ["a", "m", "z"]
    assert other.get("z").name == "Z"


def test_upload_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AVLTree().upload(tmp_path / "none.txt")


def test_clear():
    tree = AVLTree()
    tree.set(make("a"))
    tree.clear()
    assert tree.show_all() == []


def test_export_dot_empty(tmp_path):
    name = tmp_path / "tree"
    assert AVLTree().export_dot(name)
    assert (tmp_path / "tree.dot").read_text(encoding="utf-8") == HEADER + "}"


def test_export_dot_single_node(tmp_path):
    tree = AVLTree()
    tree.set(make("k"))
    name = tmp_path / "tree"
    assert tree.export_dot(name)
    expected = (
        HEADER
        + "l_k [color=black, style=filled, fontsize=2]\n"
        + "\tk -> l_k\n"
        + "r_k [color=black, style=filled, fontsize=2]\n"
        + "\tk -> r_k\n"
        + "}"
    )
    assert (tmp_path / "tree.dot").read_text(encoding="utf-8") == expected


def test_export_dot_bad_directory(tmp_path):
    assert not AVLTree().export_dot(tmp_path / "missing" / "tree")