import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Response, UploadFile

from ..deps import get_post_pipeline
from ..deps_auth import get_current_username
from ..errors import ClientInputError, CollaboratorUnavailable, MissingMedia
from ..services.post_service import PostPipeline, parse_coordinate

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/post")
async def create_post(
    background: BackgroundTasks,
    lat: Optional[str] = Form(None),
    lon: Optional[str] = Form(None),
    message: str = Form(""),
    image: Optional[UploadFile] = File(None),
    username: str = Depends(get_current_username),
    pipeline: PostPipeline = Depends(get_post_pipeline),
):
    logger.info("received one post request from %s", username)
    try:
        if image is None or not image.filename:
            raise MissingMedia()
        data = await image.read()
        if not data:
            raise MissingMedia()
        post_id, post = await pipeline.ingest(
            author=username,
            message=message,
            lat=parse_coordinate(lat),
            lon=parse_coordinate(lon),
            filename=image.filename,
            data=data,
            content_type=image.content_type,
        )
    except ClientInputError as e:
        raise HTTPException(400, e.detail)
    except CollaboratorUnavailable as e:
        raise HTTPException(500, e.detail)

    # après la réponse, jamais remonté au client
    background.add_task(pipeline.publish, post_id, post)
    return Response(status_code=200)
