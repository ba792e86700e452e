# services/decision_tree.py - Per-user like/dislike decision tree
import math
import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from domain.models import AttributeUniverse, Item, LeafLabel

logger = logging.getLogger(__name__)

def binary_entropy(q: float) -> float:
    """Entropy B(q) of a boolean variable that is true with probability q"""
    if q < 0.0 or q > 1.0:
        raise ValueError(f"Probability must be within [0, 1], got {q}")
    positive = 0.0 if q == 0.0 else q * math.log2(q)
    negative = 0.0 if q == 1.0 else (1 - q) * math.log2(1 - q)
    return -(positive + negative)

@dataclass
class Node:
    """Internal node (split attribute + both children) or leaf (label only)"""
    attribute: Optional[str] = None
    label: Optional[LeafLabel] = None
    left: Optional["Node"] = None   # items without the attribute
    right: Optional["Node"] = None  # items with the attribute

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def set_children(self, left: "Node", right: "Node"):
        if left is None or right is None:
            raise ValueError("Both children must be set when splitting a node")
        self.left = left
        self.right = right

    def __str__(self):
        token = self.label.value if self.is_leaf else self.attribute
        return f"<{token}>"

class DecisionTree:
    """
    Learns a user's preferences from their like/dislike feedback and predicts
    whether they would like an unseen item.

    The feedback dict is shared with the owning User and only read here.
    """

    def __init__(self, feedback: Dict[Item, bool], universe: AttributeUniverse):
        if feedback is None or universe is None:
            raise ValueError("DecisionTree requires a feedback mapping and an attribute universe")
        self.feedback = feedback
        self.universe = universe
        self.root: Optional[Node] = None
        self.learn_from_feedback()

    def predict(self, item: Item) -> bool:
        """True iff the tree expects the user to like the item"""
        if item is None:
            raise ValueError("Cannot predict for a missing item")
        # Nothing learned yet: better to skip a good item than push a bad one
        if self.root is None:
            return False

        node = self.root
        while not node.is_leaf:
            node = node.right if item.has_attribute(node.attribute) else node.left
        return node.label is LeafLabel.LIKE

    def learn_from_feedback(self):
        """
        Rebuild the whole tree from the current feedback.

        The new tree is built from a snapshot and swapped in at the end, so
        readers only ever see the previous tree or the finished new one.
        """
        snapshot = dict(self.feedback)
        if not snapshot:
            self.root = None
            logger.debug("No feedback yet, tree left empty")
            return

        root = Node()
        self._build(root, list(snapshot), snapshot)
        self.root = root
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Trained tree on {len(snapshot)} items: depth={self.depth}, nodes={self.node_count}")

    def _build(self, node: Node, dataset: List[Item], verdicts: Dict[Item, bool]):
        attribute = self._choose_split_attribute(dataset, verdicts)
        if attribute is None:
            node.label = self._majority_label(dataset, verdicts)
            return

        without = [item for item in dataset if not item.has_attribute(attribute)]
        with_attr = [item for item in dataset if item.has_attribute(attribute)]
        if not without or not with_attr:
            node.label = self._majority_label(dataset, verdicts)
            return

        node.attribute = attribute
        node.set_children(Node(), Node())
        self._build(node.left, without, verdicts)
        self._build(node.right, with_attr, verdicts)

    def _choose_split_attribute(self, dataset: List[Item], verdicts: Dict[Item, bool]) -> Optional[str]:
        """
        Attribute with the largest information gain, or None when the data is
        homogeneous or no attribute lowers the entropy. Ties go to the first
        attribute in universe order.
        """
        if self._is_homogeneous(dataset, verdicts):
            return None

        min_entropy = self._entropy(dataset, verdicts)
        best = None
        for attribute in self.universe:
            entropy = self._post_split_entropy(dataset, attribute, verdicts)
            if entropy < min_entropy:
                min_entropy = entropy
                best = attribute
        return best

    @staticmethod
    def _is_homogeneous(dataset: Iterable[Item], verdicts: Dict[Item, bool]) -> bool:
        return len({verdicts[item] for item in dataset}) <= 1

    @staticmethod
    def _majority_label(dataset: Iterable[Item], verdicts: Dict[Item, bool]) -> LeafLabel:
        likes = dislikes = 0
        for item in dataset:
            if verdicts[item]:
                likes += 1
            else:
                dislikes += 1
        if likes > dislikes:
            return LeafLabel.LIKE
        if dislikes > likes:
            return LeafLabel.DISLIKE
        return LeafLabel.UNSURE

    @classmethod
    def _post_split_entropy(cls, dataset: List[Item], attribute: str, verdicts: Dict[Item, bool]) -> float:
        without = [item for item in dataset if not item.has_attribute(attribute)]
        with_attr = [item for item in dataset if item.has_attribute(attribute)]
        total = len(dataset)
        return (len(without) * cls._entropy(without, verdicts)) / total \
            + (len(with_attr) * cls._entropy(with_attr, verdicts)) / total

    @staticmethod
    def _entropy(dataset: List[Item], verdicts: Dict[Item, bool]) -> float:
        # Empty partitions contribute nothing to the weighted sum
        if not dataset:
            return 0.0
        likes = sum(1 for item in dataset if verdicts[item])
        return binary_entropy(likes / len(dataset))

    @property
    def depth(self) -> int:
        """Number of levels; 0 for an empty tree"""
        def _depth(node: Optional[Node]) -> int:
            if node is None:
                return 0
            return 1 + max(_depth(node.left), _depth(node.right))
        return _depth(self.root)

    @property
    def node_count(self) -> int:
        count = 0
        pending = deque([self.root] if self.root is not None else [])
        while pending:
            node = pending.popleft()
            count += 1
            if not node.is_leaf:
                pending.extend((node.left, node.right))
        return count

    def __str__(self):
        """Level-by-level dump (not aligned), diagnostics only"""
        if self.root is None:
            return ""
        lines = []
        level = [self.root]
        while level:
            lines.append("\t".join(str(node) for node in level))
            level = [child for node in level if not node.is_leaf for child in (node.left, node.right)]
        return "\n".join(lines)
