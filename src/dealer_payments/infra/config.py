from __future__ import annotations

import os


DEFAULT_RATE_FEED_URL_TEMPLATE = (
    "https://files.dealercentives.com/feeds/meta/regional/feeds/{make}/{make}-al-finance.json"
)


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def rate_feed_url_template() -> str:
    return os.getenv("RATE_FEED_URL_TEMPLATE") or DEFAULT_RATE_FEED_URL_TEMPLATE


def rate_feed_timeout_seconds() -> float:
    return float(os.getenv("RATE_FEED_TIMEOUT_SECONDS", "5"))


def rate_cache_ttl_seconds() -> float:
    return float(os.getenv("RATE_CACHE_TTL_SECONDS", "3600"))


def db_pool_size() -> int:
    return int(os.getenv("DB_POOL_SIZE", "5"))


def db_max_overflow() -> int:
    return int(os.getenv("DB_MAX_OVERFLOW", "10"))


def db_pool_recycle_seconds() -> int:
    return int(os.getenv("DB_POOL_RECYCLE_SECONDS", "1800"))
