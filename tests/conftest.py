# tests/conftest.py - Shared fixtures
import random

import pytest

from domain.models import AttributeUniverse, Item, User

@pytest.fixture
def universe():
    return AttributeUniverse(("A", "B"))

@pytest.fixture
def items(universe):
    """P has A, Q has B, R has neither"""
    return {
        "P": Item(key="P", attributes=frozenset({"A"}), universe=universe),
        "Q": Item(key="Q", attributes=frozenset({"B"}), universe=universe),
        "R": Item(key="R", attributes=frozenset(), universe=universe),
    }

@pytest.fixture
def user(items):
    """Likes P, dislikes Q and R"""
    user = User(id=1)
    user.like_item(items["P"])
    user.dislike_items([items["Q"], items["R"]])
    return user

@pytest.fixture
def catalog():
    """Three attributes, 40 items covering every attribute combination"""
    universe = AttributeUniverse(("sports", "politics", "long"))
    items = []
    for index in range(40):
        attributes = {name for bit, name in enumerate(universe) if index >> bit & 1}
        items.append(Item(key=f"https://example.com/{index}", attributes=frozenset(attributes), universe=universe))
    return universe, items

@pytest.fixture
def rng():
    return random.Random(42)
