# domain/models.py - Core business entities
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple
from abc import ABC, abstractmethod

@dataclass(frozen=True)
class AttributeUniverse:
    """Ordered, read-only list of every boolean attribute an item may have.

    Built once by the data loader and handed to every Item and DecisionTree.
    Order matters: split selection scans attributes in this order.
    """
    names: Tuple[str, ...]
    _lookup: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        names = tuple(self.names)
        if len(set(names)) != len(names):
            raise ValueError("Attribute universe contains duplicate names")
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "_lookup", frozenset(names))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name) -> bool:
        return name in self._lookup

@dataclass(frozen=True)
class Item:
    key: str  # e.g. article URL
    attributes: FrozenSet[str] = field(compare=False)
    universe: AttributeUniverse = field(compare=False, repr=False)

    def __post_init__(self):
        if self.key is None or self.attributes is None or self.universe is None:
            raise ValueError("Item requires a key, attributes and an attribute universe")
        attributes = frozenset(self.attributes)
        unknown = [name for name in attributes if name not in self.universe]
        if unknown:
            raise ValueError(f"Item {self.key} has attributes outside the universe: {sorted(unknown)}")
        object.__setattr__(self, "attributes", attributes)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def __str__(self):
        return self.key

@dataclass(eq=False)
class User:
    id: int
    feedback: Dict[Item, bool] = field(default_factory=dict)  # item -> liked?

    def like_item(self, item: Item):
        if item is None:
            raise ValueError("Cannot like a missing item")
        self.feedback[item] = True

    def dislike_item(self, item: Item):
        if item is None:
            raise ValueError("Cannot dislike a missing item")
        self.feedback[item] = False

    def like_items(self, items: Iterable[Item]):
        for item in items:
            self.like_item(item)

    def dislike_items(self, items: Iterable[Item]):
        for item in items:
            self.dislike_item(item)

    def __eq__(self, other):
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __str__(self):
        return f"User {self.id}"

class LeafLabel(str, Enum):
    LIKE = "Like"
    DISLIKE = "Dislike"
    UNSURE = "Unsure"

# Repository interfaces (Uncle Bob's dependency inversion)
class ItemRepository(ABC):
    @abstractmethod
    def get_universe(self) -> AttributeUniverse:
        """Get the attribute universe shared by every item"""
        pass

    @abstractmethod
    def get_items(self) -> List[Item]:
        """Get the full item catalog"""
        pass

    def get_item(self, key: str) -> Optional[Item]:
        """Get item by key"""
        for item in self.get_items():
            if item.key == key:
                return item
        return None

class UserRepository(ABC):
    @abstractmethod
    def get_users(self, items_by_key: Dict[str, Item]) -> List[User]:
        """Get users with their initial feedback resolved against the catalog"""
        pass
