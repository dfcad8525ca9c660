# geopost/config.py
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- API metadata ---
    API_TITLE: str = "Geopost API"
    API_VERSION: str = "0.1.0"
    APP_ENV: str = "dev"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # --- CORS ---
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # --- JWT ---
    JWT_SECRET: str = "dev-secret"
    JWT_TTL_HOURS: int = 24

    # --- Mongo (record store) ---
    MONGO_URI: str | None = None
    DB_NAME: str = "geopost"
    POSTS_COLLECTION: str = "posts"
    USERS_COLLECTION: str = "users"
    MONGO_TIMEOUT_MS: int = 5000

    # --- Azure Storage ---
    AZURE_STORAGE_CONN: str | None = None
    AZURE_BLOB_CONTAINER_MEDIA: str = "post-media"
    AZURE_QUEUE_NAME: str = "post-ledger"
    LEDGER_ENABLED: bool = False

    # --- Image analysis ---
    ANALYSIS_URL: str | None = None     # ex: "http://10.0.0.12/score/"

    # --- Timeouts ---
    HTTP_TIMEOUT_SECONDS: float = 20.0

    # --- Search ---
    DEFAULT_SEARCH_RANGE_KM: float = 200.0
    CLUSTER_MIN_VALUE: float = 0.9

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
