import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..deps import get_post_search
from ..deps_auth import get_current_username
from ..errors import SearchFailed
from ..models.post import Post
from ..services.post_service import parse_coordinate
from ..services.search_service import PostSearch

router = APIRouter()

def _format_km(value: float) -> str:
    # repr : pas d'arrondi, 1e-07 reste positif
    return f"{value!r}km"

@router.get("/search", response_model=List[Post])
async def search(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    range_km: Optional[float] = Query(None, gt=0, alias="range"),
    username: str = Depends(get_current_username),
    posts: PostSearch = Depends(get_post_search),
):
    if range_km is not None and not math.isfinite(range_km):
        raise HTTPException(422, "range must be a finite number")
    radius = _format_km(range_km if range_km is not None else settings.DEFAULT_SEARCH_RANGE_KM)
    try:
        return await posts.nearby(parse_coordinate(lat), parse_coordinate(lon), radius)
    except SearchFailed as e:
        raise HTTPException(500, e.detail)

@router.get("/cluster", response_model=List[Post])
async def cluster(
    term: str = "",
    username: str = Depends(get_current_username),
    posts: PostSearch = Depends(get_post_search),
):
    try:
        return await posts.cluster(term)
    except SearchFailed as e:
        raise HTTPException(500, e.detail)
