# config.py - Configuration management
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Data files (news popularity catalog + user feedback)
    ITEMS_PATH: str = "data/OnlineNewsPopularity.csv"
    USERS_PATH: str = "data/Users.txt"
    ITEM_KEYS_EXPORT_PATH: Optional[str] = None  # Set to write every item key to a text file

    # Recommender
    MAX_RECOMMENDATIONS: int = 5
    RANDOM_SEED: Optional[int] = None  # Fix for reproducible sampling

    # Logging
    LOG_LEVEL: str = "INFO"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    class Config:
        env_file = ".env"

settings = Settings()
