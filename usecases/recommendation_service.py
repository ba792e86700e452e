# usecases/recommendation_service.py - Business logic (Uncle Bob's use cases layer)
import random
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from config import settings
from domain.models import AttributeUniverse, Item, ItemRepository, User, UserRepository
from services.decision_tree import DecisionTree

logger = logging.getLogger(__name__)

class RecommendationService:
    """
    Owns one decision tree per user and answers recommendation queries.

    Each tree shares its user's feedback dict, so recording feedback on the
    user and retraining the tree is enough to keep both in step.
    """

    def __init__(
        self,
        users: Iterable[User],
        items: Iterable[Item],
        universe: AttributeUniverse,
        rng: Optional[random.Random] = None,
        max_recommendations: int = settings.MAX_RECOMMENDATIONS
    ):
        if users is None or items is None or universe is None:
            raise ValueError("RecommendationService requires users, items and an attribute universe")
        self.universe = universe
        self.rng = rng if rng is not None else random.Random()
        self.max_recommendations = max_recommendations

        self.items_by_key: Dict[str, Item] = {}
        for item in items:
            if item is None:
                raise ValueError("Item catalog contains a missing item")
            self.items_by_key[item.key] = item
        self.items: List[Item] = list(self.items_by_key.values())

        self.trees: Dict[User, DecisionTree] = {}
        self.users_by_id: Dict[int, User] = {}
        for user in users:
            self.register_user(user)

        logger.info(f"Recommender ready: {len(self.users_by_id)} users, {len(self.items)} items")

    @property
    def users(self) -> List[User]:
        return list(self.users_by_id.values())

    def register_user(self, user: User) -> DecisionTree:
        """Add (or replace) a user and train their tree on current feedback"""
        if user is None:
            raise ValueError("Cannot register a missing user")
        previous = self.users_by_id.get(user.id)
        if previous is not None:
            del self.trees[previous]
        tree = DecisionTree(user.feedback, self.universe)
        self.users_by_id[user.id] = user
        self.trees[user] = tree
        return tree

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_item(self, key: str) -> Optional[Item]:
        return self.items_by_key.get(key)

    def tree_for(self, user: User) -> DecisionTree:
        if user is None:
            raise ValueError("User is required")
        tree = self.trees.get(user)
        if tree is None:
            raise ValueError(f"{user} is not registered with the recommender")
        return tree

    def recommend_to_user(self, user: User) -> Set[Item]:
        """
        Up to max_recommendations items the user has not rated and the tree
        predicts they will like.

        Items are drawn at random with replacement, and drawing stops once
        the number of draws reaches the catalog size, so fewer items may be
        returned even when more would qualify.
        """
        tree = self.tree_for(user)
        # Use the registered instance so feedback recorded through the service is seen
        known = self.users_by_id[user.id].feedback
        recommendations: Set[Item] = set()
        draws = 0
        while draws < len(self.items) and len(recommendations) < self.max_recommendations:
            item = self.rng.choice(self.items)
            draws += 1
            if item not in known and tree.predict(item):
                recommendations.add(item)
        logger.debug(f"{user}: {len(recommendations)} recommendations after {draws} draws")
        return recommendations

    def recommend_item_to_users(self, item: Item) -> Set[User]:
        """Every user whose tree predicts they will like the item"""
        if item is None:
            raise ValueError("Item is required")
        return {user for user, tree in self.trees.items() if tree.predict(item)}

    def record_feedback(self, users: Iterable[User], item: Item, liked: bool):
        """Record a like/dislike for each user, then rebuild their trees"""
        if users is None or item is None:
            raise ValueError("Users and item are required")
        users = list(users)
        # Validate everyone first so a bad id leaves no user half-updated
        trees = [self.tree_for(user) for user in users]
        for user, tree in zip(users, trees):
            registered = self.users_by_id[user.id]
            if liked:
                registered.like_item(item)
            else:
                registered.dislike_item(item)
            tree.learn_from_feedback()
        logger.info(f"Recorded {'like' if liked else 'dislike'} of {item} for {len(users)} user(s)")

    def users_liked_item(self, users: Iterable[User], item: Item):
        self.record_feedback(users, item, True)

    def users_disliked_item(self, users: Iterable[User], item: Item):
        self.record_feedback(users, item, False)

    def describe(self) -> Dict[int, str]:
        """Text dump of each user's tree keyed by user id"""
        return {user.id: str(tree) for user, tree in self.trees.items()}

    def __str__(self):
        parts = []
        for user, tree in self.trees.items():
            parts.append(f"\n{user} decision tree:\n{tree}\n")
        return "".join(parts)

# Global recommendation service instance
recommendation_service: Optional[RecommendationService] = None

def get_recommendation_service() -> RecommendationService:
    """Dependency injection for recommendation service"""
    global recommendation_service
    if recommendation_service is None:
        raise RuntimeError("Recommendation service not initialized")
    return recommendation_service

def init_recommendation_service(
    item_repo: ItemRepository,
    user_repo: UserRepository,
    rng: Optional[random.Random] = None
) -> RecommendationService:
    """Initialize global recommendation service from the data repositories"""
    global recommendation_service
    universe = item_repo.get_universe()
    items = item_repo.get_items()
    users = user_repo.get_users({item.key: item for item in items})
    if rng is None and settings.RANDOM_SEED is not None:
        rng = random.Random(settings.RANDOM_SEED)
    recommendation_service = RecommendationService(users, items, universe, rng=rng)
    return recommendation_service
