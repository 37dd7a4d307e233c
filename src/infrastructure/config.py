"""Runtime configuration loaded from the environment."""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_METADATA_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/"
    "1sRWp95wqo3a7lLBbtNd_3KkTyGjx_9sctTOL5JOb6pA/export?format=csv"
)


class Settings(BaseModel):
    """Service settings."""

    metadata_csv_url: str = DEFAULT_METADATA_CSV_URL
    problem_site_host: str = "leetcode.com"
    leetcode_graphql_url: str = "https://leetcode.com/graphql"
    redis_url: str | None = None
    http_timeout: float = 30.0
    lookup_batch_size: int = 5
    lookup_batch_delay: float = 1.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        values = {
            "metadata_csv_url": os.getenv("METADATA_CSV_URL"),
            "problem_site_host": os.getenv("PROBLEM_SITE_HOST"),
            "leetcode_graphql_url": os.getenv("LEETCODE_GRAPHQL_URL"),
            "redis_url": os.getenv("REDIS_URL"),
            "http_timeout": os.getenv("HTTP_TIMEOUT"),
            "lookup_batch_size": os.getenv("LOOKUP_BATCH_SIZE"),
            "lookup_batch_delay": os.getenv("LOOKUP_BATCH_DELAY"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls(**{key: value for key, value in values.items() if value})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
