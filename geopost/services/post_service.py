# geopost/services/post_service.py
import logging
import uuid
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import WriteConcern
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from ..errors import GeopostError, IndexWriteFailed
from ..models.post import Location, Post
from .media_service import ImageScorer, classify, needs_score
from .search_service import encode_post
from .storage_service import BlobStore, guess_content_type

logger = logging.getLogger(__name__)


def parse_coordinate(value: Optional[str]) -> float:
    # valeur illisible -> 0.0 (comportement historique, pas de 400)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def new_post_id() -> str:
    return uuid.uuid4().hex


class PostPipeline:
    """
    classify/score -> blob -> record -> (later) ledger.
    Stops at the first failing stage; nothing is rolled back.
    """

    def __init__(self, posts: AsyncIOMotorCollection, blobs: BlobStore, scorer: ImageScorer, ledger):
        # w=majority : le post doit être visible par la recherche suivante
        self.posts = posts.with_options(write_concern=WriteConcern(w="majority"))
        self.blobs = blobs
        self.scorer = scorer
        self.ledger = ledger

    async def ingest(self, author: str, message: str, lat: float, lon: float,
                     filename: str, data: bytes, content_type: Optional[str] = None) -> tuple[str, Post]:
        post = Post(
            author=author,
            message=message or "",
            location=Location(lat=lat, lon=lon),
            mediaKind=classify(filename),
        )
        post_id = new_post_id()

        if needs_score(filename):
            post.score = await run_in_threadpool(self.scorer.score, data, filename)
            logger.info("scored post_id=%s score=%s", post_id, post.score)

        post.mediaURL = await run_in_threadpool(
            self.blobs.save, post_id, data, guess_content_type(filename, content_type)
        )

        # upsert sur le même id : un rejeu ne crée pas de doublon
        try:
            await self.posts.replace_one({"_id": post_id}, encode_post(post_id, post), upsert=True)
        except PyMongoError as e:
            logger.exception("index write failed post_id=%s (blob %s left orphaned)", post_id, post.mediaURL)
            raise IndexWriteFailed() from e
        logger.info("saved one post to index: post_id=%s message=%r", post_id, post.message)
        return post_id, post

    def publish(self, post_id: str, post: Post) -> None:
        """Best-effort ledger copy; errors are logged and dropped."""
        try:
            self.ledger.record(post_id, post)
        except GeopostError as e:
            logger.warning("ledger write skipped post_id=%s: %s", post_id, e.detail)
        except Exception:
            logger.exception("ledger write crashed post_id=%s", post_id)
