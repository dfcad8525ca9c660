# geopost/services/search_service.py
"""
Read side of the post collection: geo-distance search and attribute clusters.

Records are stored with a GeoJSON `location` (for the 2dsphere index) and are
decoded back into `Post` one hit at a time. A hit that does not decode is
collected as a `DecodeFailure`, logged with a count and left out of the
result; callers get the posts that did decode.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from ..errors import SearchFailed
from ..models.post import Post

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6378.1

# facteurs vers le kilomètre (unités de distance façon Elasticsearch)
_UNITS_KM = {
    "km": 1.0,
    "m": 0.001,
    "mi": 1.609344,
    "yd": 0.0009144,
    "ft": 0.0003048,
    "nmi": 1.852,
}
_DISTANCE_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:e[-+]?[0-9]+)?)\s*([a-z]*)\s*$")


def parse_distance(value: str) -> float:
    """'200km' -> 200.0 ; '500m' -> 0.5 ; a bare number is in metres."""
    m = _DISTANCE_RE.match(value or "")
    if not m:
        raise ValueError(f"bad distance: {value!r}")
    magnitude, unit = float(m.group(1)), (m.group(2) or "m")
    if unit not in _UNITS_KM:
        raise ValueError(f"bad distance unit: {unit!r}")
    km = magnitude * _UNITS_KM[unit]
    if km <= 0:
        raise ValueError(f"distance must be positive: {value!r}")
    return km


# --- record codec -------------------------------------------------------------
def encode_post(post_id: str, post: Post) -> dict:
    doc = post.model_dump()
    loc = doc.pop("location")
    doc["_id"] = post_id
    doc["location"] = {"type": "Point", "coordinates": [loc["lon"], loc["lat"]]}
    return doc


def decode_post(doc: dict) -> Post:
    src = {k: v for k, v in doc.items() if k != "_id"}
    loc = src.get("location")
    if isinstance(loc, dict) and "coordinates" in loc:
        lon, lat = loc["coordinates"]
        src["location"] = {"lat": lat, "lon": lon}
    return Post.model_validate(src)


@dataclass
class DecodeFailure:
    record_id: Any
    error: str


def decode_hits(docs: Iterable[dict]) -> tuple[list[Post], list[DecodeFailure]]:
    posts: list[Post] = []
    failures: list[DecodeFailure] = []
    for doc in docs:
        try:
            posts.append(decode_post(doc))
        except (ValidationError, ValueError, TypeError) as e:
            failures.append(DecodeFailure(record_id=doc.get("_id"), error=str(e)))
    return posts, failures


# --- query builders -----------------------------------------------------------
def build_geo_query(lat: float, lon: float, radius_km: float, field: str = "location") -> dict:
    return {
        field: {
            "$geoWithin": {
                "$centerSphere": [[lon, lat], radius_km / EARTH_RADIUS_KM],
            }
        }
    }


def build_range_query(field: str, gte: float) -> dict:
    # nom de champ pris tel quel (pas de liste blanche)
    return {field: {"$gte": gte}}


class PostSearch:
    def __init__(self, posts: AsyncIOMotorCollection, cluster_min: float = 0.9):
        self.posts = posts
        self.cluster_min = cluster_min

    async def nearby(self, lat: float, lon: float, radius: str = "200km") -> list[Post]:
        try:
            radius_km = parse_distance(radius)
        except ValueError as e:
            logger.warning("search rejected: %s", e)
            raise SearchFailed() from e
        return await self._run(build_geo_query(lat, lon, radius_km))

    async def cluster(self, field: str) -> list[Post]:
        if not field:
            raise SearchFailed()
        return await self._run(build_range_query(field, self.cluster_min))

    async def _run(self, query: dict) -> list[Post]:
        docs = []
        try:
            async for doc in self.posts.find(query):
                docs.append(doc)
        except PyMongoError as e:
            logger.exception("post query failed")
            raise SearchFailed() from e
        posts, failures = decode_hits(docs)
        if failures:
            logger.warning("dropped %d undecodable hit(s): %s", len(failures),
                           ", ".join(str(f.record_id) for f in failures[:10]))
        logger.info("found a total of %d post(s)", len(posts))
        return posts
