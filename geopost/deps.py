# geopost/deps.py
from typing import Optional

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .config import settings
from .services.auth_service import CredentialStore
from .services.ledger_service import build_ledger
from .services.media_service import ImageScorer
from .services.post_service import PostPipeline
from .services.search_service import PostSearch
from .services.storage_service import BlobStore
from .utils.security import TokenService

# --- Clients singletons -------------------------------------------------------
_mongo: Optional[AsyncIOMotorClient] = None
_tokens: Optional[TokenService] = None
_blobs: Optional[BlobStore] = None
_scorer: Optional[ImageScorer] = None
_ledger = None

def get_db() -> AsyncIOMotorDatabase:
    global _mongo
    if _mongo is None:
        if not settings.MONGO_URI:
            raise RuntimeError("MONGO_URI missing")
        _mongo = AsyncIOMotorClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
            socketTimeoutMS=settings.MONGO_TIMEOUT_MS,
        )
    return _mongo[settings.DB_NAME]

def get_token_service() -> TokenService:
    global _tokens
    if _tokens is None:
        _tokens = TokenService(settings.JWT_SECRET, ttl_hours=settings.JWT_TTL_HOURS)
    return _tokens

def get_blob_store() -> BlobStore:
    global _blobs
    if _blobs is None:
        if not settings.AZURE_STORAGE_CONN:
            raise RuntimeError("AZURE_STORAGE_CONN missing")
        _blobs = BlobStore.from_connection_string(
            settings.AZURE_STORAGE_CONN,
            settings.AZURE_BLOB_CONTAINER_MEDIA,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return _blobs

def get_scorer() -> ImageScorer:
    global _scorer
    if _scorer is None:
        _scorer = ImageScorer(settings.ANALYSIS_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
    return _scorer

def get_ledger():
    global _ledger
    if _ledger is None:
        _ledger = build_ledger(
            settings.LEDGER_ENABLED,
            settings.AZURE_STORAGE_CONN,
            settings.AZURE_QUEUE_NAME,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return _ledger

# --- Services (par requête, clients partagés) -----------------------------------
def get_credential_store(db=Depends(get_db)) -> CredentialStore:
    return CredentialStore(db[settings.USERS_COLLECTION])

def get_post_search(db=Depends(get_db)) -> PostSearch:
    return PostSearch(db[settings.POSTS_COLLECTION], cluster_min=settings.CLUSTER_MIN_VALUE)

def get_post_pipeline(
    db=Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
    scorer: ImageScorer = Depends(get_scorer),
    ledger=Depends(get_ledger),
) -> PostPipeline:
    return PostPipeline(db[settings.POSTS_COLLECTION], blobs, scorer, ledger)
