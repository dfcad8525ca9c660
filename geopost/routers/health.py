from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from pymongo.errors import PyMongoError
from ..deps import get_db

router = APIRouter()

@router.get("/health")
async def health(db=Depends(get_db)):
    try:
        await db.command("ping")
        store = "ok"
    except PyMongoError:
        store = "unreachable"
    return {
        "status": "ok",
        "record_store": store,
        "time": datetime.now(timezone.utc).isoformat()
    }
