import dataclasses
from typing import Optional

import dotenv

from mission_gallery.utils import as_bool
from mission_gallery.utils import csv_list
from mission_gallery.utils import env
from mission_gallery.utils import optional_str


dotenv.load_dotenv()


@dataclasses.dataclass
class Config:
    """Application configuration settings."""

    # Logging
    log_level: str = env("LOG_LEVEL:INFO")
    loki_url: str = env("LOKI_URL:", convert=str)
    loki_enabled: bool = env("LOKI_ENABLED:false", convert=as_bool)

    # Server Configuration
    host: str = env("HOST:0.0.0.0")
    port: int = env("PORT:8000", convert=int)
    environment: str = env("ENVIRONMENT:", convert=str)
    debug: bool = env("DEBUG:false", convert=as_bool)
    enable_api_docs: bool = env("ENABLE_API_DOCS:false", convert=as_bool)
    cors_origins: list[str] = env("CORS_ORIGINS:*", convert=csv_list)

    # Redis holds the metadata index and the gallery listing cache
    redis_url: str = env("REDIS_URL:redis://127.0.0.1:6379/0")

    # Object storage (any S3-compatible endpoint)
    s3_bucket: str = env("S3_BUCKET_NAME")
    s3_endpoint_url: Optional[str] = env("S3_ENDPOINT_URL:", convert=optional_str)
    s3_region: str = env("AWS_REGION:auto")
    aws_access_key_id: Optional[str] = env("AWS_ACCESS_KEY_ID:", convert=optional_str)
    aws_secret_access_key: Optional[str] = env("AWS_SECRET_ACCESS_KEY:", convert=optional_str)
    # Base for public object URLs; derived from endpoint + bucket when empty
    public_base_url: Optional[str] = env("PUBLIC_BASE_URL:", convert=optional_str)
    store_executor_workers: int = env("STORE_EXECUTOR_WORKERS:8", convert=int)

    # Upload protocol
    presigned_url_ttl_seconds: int = env("PRESIGNED_URL_TTL_SECONDS:3600", convert=int)

    # Listing retries (object store list only)
    store_max_retries: int = env("STORE_MAX_RETRIES:3", convert=int)
    store_retry_base_ms: int = env("STORE_RETRY_BASE_MS:200", convert=int)
    store_retry_max_ms: int = env("STORE_RETRY_MAX_MS:2000", convert=int)

    # Gallery
    gallery_cache_ttl_seconds: int = env("GALLERY_CACHE_TTL_SECONDS:3600", convert=int)
    gallery_page_size: int = env("GALLERY_PAGE_SIZE:12", convert=int)


def get_config() -> Config:
    """Get application configuration."""
    cfg = Config()

    env_value = getattr(cfg, "environment", None)
    if not env_value or not env_value.strip():
        raise ValueError("ENVIRONMENT variable is required but not set or empty")

    if not cfg.s3_bucket.strip():
        raise ValueError("S3_BUCKET_NAME variable is required but empty")

    if cfg.gallery_page_size < 1:
        raise ValueError("GALLERY_PAGE_SIZE must be at least 1")

    return cfg
