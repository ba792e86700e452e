# tests/test_data_loader.py - File-backed repositories
import pytest

from adapters.data_loader import (
    CsvItemRepository,
    TextUserRepository,
    compute_thresholds,
    parse_users,
    read_item_frame,
    write_item_keys,
)

ITEM_CSV = """url, timedelta, n_tokens, shares
http://a, 10, 1, 100
http://b, 20, 3, 300
http://c, 30, 5, 50
"""

USER_FILE = """# id liked disliked
1 2 1
http://a
http://b
http://c

2 0 1
http://b
"""

@pytest.fixture
def item_csv(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text(ITEM_CSV)
    return path

@pytest.fixture
def item_repo(item_csv):
    return CsvItemRepository(str(item_csv))

@pytest.fixture
def items_by_key(item_repo):
    return {item.key: item for item in item_repo.get_items()}

class TestItemCsv:
    def test_header_is_stripped(self, item_csv):
        assert list(read_item_frame(item_csv).columns) == ["url", "timedelta", "n_tokens", "shares"]

    def test_thresholds_are_column_means(self, item_csv):
        thresholds = compute_thresholds(read_item_frame(item_csv))
        assert list(thresholds.index) == ["n_tokens", "shares"]
        assert thresholds["n_tokens"] == pytest.approx(3.0)
        assert thresholds["shares"] == pytest.approx(150.0)

    def test_universe_skips_key_and_timedelta(self, item_repo):
        assert list(item_repo.get_universe()) == ["n_tokens", "shares"]

    def test_attributes_at_or_above_mean(self, item_repo):
        assert item_repo.get_item("http://a").attributes == frozenset()
        assert item_repo.get_item("http://b").attributes == frozenset({"n_tokens", "shares"})
        assert item_repo.get_item("http://c").attributes == frozenset({"n_tokens"})
        assert item_repo.get_item("http://missing") is None

    def test_items_share_the_universe(self, item_repo):
        universe = item_repo.get_universe()
        assert all(item.universe is universe for item in item_repo.get_items())

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CsvItemRepository(str(tmp_path / "nope.csv")).get_items()

    def test_write_item_keys(self, item_csv, tmp_path):
        out = tmp_path / "out" / "keys.txt"
        assert write_item_keys(str(item_csv), str(out)) == 3
        assert out.read_text().splitlines() == ["http://a", "http://b", "http://c"]

class TestUserFile:
    def test_likes_and_dislikes_are_applied(self, tmp_path, items_by_key):
        path = tmp_path / "users.txt"
        path.write_text(USER_FILE)
        users = TextUserRepository(str(path)).get_users(items_by_key)

        assert [user.id for user in users] == [1, 2]
        assert users[0].feedback == {
            items_by_key["http://a"]: True,
            items_by_key["http://b"]: True,
            items_by_key["http://c"]: False,
        }
        assert users[1].feedback == {items_by_key["http://b"]: False}

    def test_unknown_item_is_rejected(self, items_by_key):
        with pytest.raises(ValueError, match="unknown item"):
            parse_users(["1 1 0", "http://zzz"], items_by_key)

    def test_truncated_record_is_rejected(self, items_by_key):
        with pytest.raises(ValueError, match="ends before"):
            parse_users(["1 2 0", "http://a"], items_by_key)

    def test_malformed_header_is_rejected(self, items_by_key):
        with pytest.raises(ValueError):
            parse_users(["1 two 0"], items_by_key)
        with pytest.raises(ValueError):
            parse_users(["1 2"], items_by_key)

    def test_missing_file(self, tmp_path, items_by_key):
        with pytest.raises(FileNotFoundError):
            TextUserRepository(str(tmp_path / "nope.txt")).get_users(items_by_key)

    @pytest.mark.parametrize("header", ["1 -2 0", "1 0 -1"])
    def test_negative_counts_are_rejected(self, items_by_key, header):
        with pytest.raises(ValueError, match="Line 1: item counts must not be negative"):
            parse_users([header, "http://a"], items_by_key)
