# tests/test_models.py - Domain entity behaviour
from dataclasses import FrozenInstanceError

import pytest

from domain.models import AttributeUniverse, Item, LeafLabel, User

def test_universe_keeps_order_and_membership():
    universe = AttributeUniverse(["b", "a", "c"])
    assert list(universe) == ["b", "a", "c"]
    assert len(universe) == 3
    assert "a" in universe
    assert "z" not in universe

def test_universe_rejects_duplicates():
    with pytest.raises(ValueError):
        AttributeUniverse(("a", "a"))

def test_item_equality_and_hash_use_key_only(universe):
    first = Item(key="u", attributes=frozenset({"A"}), universe=universe)
    second = Item(key="u", attributes=frozenset({"B"}), universe=universe)
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1

def test_item_absent_attribute_is_false(items):
    assert items["P"].has_attribute("A")
    assert not items["P"].has_attribute("B")
    assert not items["R"].has_attribute("A")

def test_item_rejects_attribute_outside_universe(universe):
    with pytest.raises(ValueError):
        Item(key="x", attributes=frozenset({"C"}), universe=universe)

def test_item_is_immutable(items):
    with pytest.raises(FrozenInstanceError):
        items["P"].key = "other"

def test_user_feedback_last_write_wins(items):
    user = User(id=7)
    user.like_item(items["P"])
    user.dislike_item(items["P"])
    assert user.feedback == {items["P"]: False}

def test_user_bulk_feedback(items):
    user = User(id=7)
    user.like_items([items["P"], items["Q"]])
    user.dislike_items([items["R"]])
    assert user.feedback == {items["P"]: True, items["Q"]: True, items["R"]: False}

def test_user_rejects_missing_item():
    with pytest.raises(ValueError):
        User(id=1).like_item(None)
    with pytest.raises(ValueError):
        User(id=1).dislike_item(None)

def test_user_identity_is_id():
    assert User(id=3) == User(id=3, feedback={})
    assert hash(User(id=3)) == hash(User(id=3))
    assert User(id=3) != User(id=4)
    assert str(User(id=3)) == "User 3"

def test_leaf_label_tokens():
    assert [label.value for label in LeafLabel] == ["Like", "Dislike", "Unsure"]

def test_universe_membership_uses_a_set():
    universe = AttributeUniverse(tuple(f"attr_{index}" for index in range(1000)))
    assert universe._lookup == frozenset(universe.names)
    assert "attr_999" in universe
    assert "attr_1000" not in universe
    assert universe == AttributeUniverse(tuple(universe.names))
