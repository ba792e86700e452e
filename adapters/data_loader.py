# adapters/data_loader.py - File-backed item and user repositories
import pandas as pd
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging
import sys

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from domain.models import AttributeUniverse, Item, ItemRepository, User, UserRepository

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

KEY_COLUMN = 0        # url
IGNORED_COLUMNS = 1   # timedelta follows the key and is not an attribute

def read_item_frame(csv_path) -> pd.DataFrame:
    """Read the item CSV with stripped header names"""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Item file not found: {csv_path}")
    frame = pd.read_csv(csv_path, skipinitialspace=True)
    frame.columns = [str(column).strip() for column in frame.columns]
    if frame.shape[1] < 2 + IGNORED_COLUMNS:
        raise ValueError(f"Item file {csv_path} has no attribute columns")
    return frame

def attribute_columns(frame: pd.DataFrame) -> List[str]:
    return list(frame.columns[KEY_COLUMN + 1 + IGNORED_COLUMNS:])

def compute_thresholds(frame: pd.DataFrame) -> pd.Series:
    """
    Mean value of every attribute column. An item "has" an attribute iff its
    value is at or above this mean.
    """
    columns = attribute_columns(frame)
    return frame[columns].astype(float).mean()

def build_items(frame: pd.DataFrame, thresholds: Optional[pd.Series] = None) -> Tuple[AttributeUniverse, Dict[str, Item]]:
    """Convert the numeric frame into a universe plus boolean items keyed by key"""
    columns = attribute_columns(frame)
    if thresholds is None:
        thresholds = compute_thresholds(frame)
    universe = AttributeUniverse(tuple(columns))

    values = frame[columns].astype(float).to_numpy()
    flags = values >= thresholds[columns].to_numpy()
    names = np.array(columns, dtype=object)
    keys = frame.iloc[:, KEY_COLUMN].astype(str).str.strip()

    items: Dict[str, Item] = {}
    for key, row_flags in zip(keys, flags):
        items[key] = Item(key=key, attributes=frozenset(names[row_flags]), universe=universe)
    return universe, items

class CsvItemRepository(ItemRepository):
    """Item catalog read from a news-popularity style CSV"""

    def __init__(self, csv_path: str):
        self.csv_path = Path(csv_path)
        self._universe: Optional[AttributeUniverse] = None
        self._items: Optional[Dict[str, Item]] = None

    def _load(self):
        if self._items is not None:
            return
        try:
            logger.info(f"Parsing item file {self.csv_path}")
            frame = read_item_frame(self.csv_path)
            thresholds = compute_thresholds(frame)
            self._universe, self._items = build_items(frame, thresholds)
            logger.info(f"✅ Loaded {len(self._items):,} items with {len(self._universe)} attributes")
        except Exception as e:
            logger.error(f"❌ Failed to load items from {self.csv_path}: {e}")
            raise

    def get_universe(self) -> AttributeUniverse:
        self._load()
        return self._universe

    def get_items(self) -> List[Item]:
        self._load()
        return list(self._items.values())

    def get_item(self, key: str) -> Optional[Item]:
        self._load()
        return self._items.get(key)

def parse_users(lines: List[str], items_by_key: Dict[str, Item]) -> List[User]:
    """
    Parse user records. Each record is a header line
    "<id> <liked count> <disliked count>" followed by that many liked keys and
    then disliked keys, one per line. Lines starting with '#' and blank lines
    are skipped.
    """
    records = [(number, line.strip()) for number, line in enumerate(lines, start=1)]
    records = [(number, line) for number, line in records if line and not line.startswith("#")]

    users: List[User] = []
    position = 0
    while position < len(records):
        number, header = records[position]
        position += 1
        fields = header.split()
        if len(fields) != 3:
            raise ValueError(f"Line {number}: expected '<id> <liked> <disliked>', got {header!r}")
        try:
            user_id, liked_count, disliked_count = (int(value) for value in fields)
        except ValueError:
            raise ValueError(f"Line {number}: user header must be three integers, got {header!r}")
        if liked_count < 0 or disliked_count < 0:
            raise ValueError(f"Line {number}: item counts must not be negative, got {header!r}")

        user = User(id=user_id)
        for liked in [True] * liked_count + [False] * disliked_count:
            if position >= len(records):
                raise ValueError(f"Line {number}: {user} record ends before all items were listed")
            item_number, key = records[position]
            position += 1
            item = items_by_key.get(key)
            if item is None:
                raise ValueError(f"Line {item_number}: unknown item {key!r} for {user}")
            if liked:
                user.like_item(item)
            else:
                user.dislike_item(item)
        users.append(user)
    return users

class TextUserRepository(UserRepository):
    """Users and their initial feedback read from a plain-text file"""

    def __init__(self, path: str):
        self.path = Path(path)

    def get_users(self, items_by_key: Dict[str, Item]) -> List[User]:
        if not self.path.exists():
            raise FileNotFoundError(f"User file not found: {self.path}")
        try:
            logger.info(f"Parsing user file {self.path}")
            with open(self.path, "r", encoding="utf-8") as f:
                users = parse_users(f.readlines(), items_by_key)
            logger.info(f"✅ Loaded {len(users)} users")
            return users
        except Exception as e:
            logger.error(f"❌ Failed to load users from {self.path}: {e}")
            raise

def write_item_keys(csv_path: str, out_path: str) -> int:
    """Write every item key, one per line, for handing out to survey participants"""
    frame = read_item_frame(csv_path)
    keys = frame.iloc[:, KEY_COLUMN].astype(str).str.strip()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        for key in keys:
            f.write(f"{key}\n")
    logger.info(f"Wrote {len(keys):,} item keys to {out_path}")
    return len(keys)
