import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


class Config:
    # Chat
    ADMIN_ID = os.getenv("STOREFRONT_ADMIN_ID", "admin")
    CHAT_QUEUE_SIZE = _int_env("CHAT_QUEUE_SIZE", 100)

    # Uploaded files are stored by the upload layer; we only record their path
    UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads").rstrip("/")

    # Optimistic concurrency for like/view/sell counters
    COUNTER_RETRY_ATTEMPTS = _int_env("COUNTER_RETRY_ATTEMPTS", 3)

    # Search paging
    SEARCH_DEFAULT_LIMIT = _int_env("SEARCH_DEFAULT_LIMIT", 10)
    SEARCH_MAX_LIMIT = _int_env("SEARCH_MAX_LIMIT", 100)

    # Meilisearch replaces the repository scan when a URL is set
    MEILI_URL = os.getenv("MEILI_URL", "")
    MEILI_API_KEY = os.getenv("MEILI_API_KEY") or None
    MEILI_INDEX = os.getenv("MEILI_INDEX", "products")

    # HTTP
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


config = Config()
