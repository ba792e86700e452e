# scripts/report.py - Console report of recommendations for every user
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from adapters.data_loader import CsvItemRepository, TextUserRepository, write_item_keys
from usecases.recommendation_service import init_recommendation_service
from config import settings

def report():
    """Print the recommended items for each user"""
    if settings.ITEM_KEYS_EXPORT_PATH:
        print(f"📝 Writing item keys to {settings.ITEM_KEYS_EXPORT_PATH}...")
        write_item_keys(settings.ITEMS_PATH, settings.ITEM_KEYS_EXPORT_PATH)

    service = init_recommendation_service(
        CsvItemRepository(settings.ITEMS_PATH),
        TextUserRepository(settings.USERS_PATH)
    )

    for user in sorted(service.users, key=lambda u: u.id):
        recommended = service.recommend_to_user(user)
        print(f"The system recommends the following items to user {user.id}:")
        for item in recommended:
            print(item)
        print()

    # There is no ground truth to assert against here; participants have to
    # confirm whether they would have liked what was recommended.

if __name__ == "__main__":
    report()
