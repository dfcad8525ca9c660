import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import GEOSPHERE
from pymongo.errors import PyMongoError
from ..errors import BootstrapFailure

logger = logging.getLogger(__name__)

async def ensure_indexes(db: AsyncIOMotorDatabase, posts: str = "posts", users: str = "users") -> None:
    """
    Idempotent. Creates the two collections if missing, and the 2dsphere index
    the geo search relies on. Any error is fatal for startup.
    """
    try:
        existing = set(await db.list_collection_names())
        if posts not in existing:
            await db.create_collection(posts)
            logger.info("created collection %s", posts)
        await db[posts].create_index([("location", GEOSPHERE)], name="post_location_geo")
        if users not in existing:
            await db.create_collection(users)
            logger.info("created collection %s", users)
    except PyMongoError as e:
        raise BootstrapFailure(f"Index bootstrap failed: {e}") from e
