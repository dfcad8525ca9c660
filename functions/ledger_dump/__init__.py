import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

import azure.functions as func
from azure.core import MatchConditions
from azure.core.exceptions import ResourceExistsError, ResourceModifiedError
from azure.storage.blob import BlobServiceClient

# ---------- Logger ----------
logger = logging.getLogger("ledger_dump")
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(name)s] %(levelname)s: %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

# ---------- Config ----------
ANALYTICS_CONT = os.getenv("AZURE_BLOB_CONTAINER_ANALYTICS", "analytics") or "analytics"

ROW_FIELDS = ("postId", "user", "message", "lat", "lon")

def _blob_client() -> BlobServiceClient:
    cs = os.getenv("AzureWebJobsStorage") or os.getenv("StorageConn")
    if not cs:
        raise RuntimeError("AzureWebJobsStorage/StorageConn missing")
    return BlobServiceClient.from_connection_string(cs)

def _safe_json_loads(s: str) -> Optional[dict]:
    try:
        data = json.loads(s)
    except ValueError as e:
        logger.error("JSON parse error: %s / payload head=%r", e, s[:200])
        return None
    return data if isinstance(data, dict) else None

def to_row(message: dict) -> Optional[dict]:
    """
    Ledger message {"id": ..., "post": {...}} -> flat analytics row.
    None when the message lacks the id or the location.
    """
    post_id = message.get("id")
    post = message.get("post") or {}
    loc = post.get("location") or {}
    if not post_id or "lat" not in loc or "lon" not in loc:
        return None
    try:
        lat, lon = float(loc["lat"]), float(loc["lon"])
    except (TypeError, ValueError):
        return None
    return {
        "postId": str(post_id),
        "user": post.get("author") or "",
        "message": post.get("message") or "",
        "lat": lat,
        "lon": lon,
    }

def daily_blob_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"posts-{now:%Y%m%d}.jsonl"

def append_row(bsc: BlobServiceClient, row: dict, blob_name: str) -> None:
    blob = bsc.get_blob_client(container=ANALYTICS_CONT, blob=blob_name)
    try:
        # If-None-Match: * -> ne tronque jamais un fichier du jour déjà créé
        blob.create_append_blob(etag="*", match_condition=MatchConditions.IfMissing)
    except (ResourceExistsError, ResourceModifiedError):
        pass
    blob.append_block((json.dumps(row) + "\n").encode("utf-8"))

# ---------- Main ----------
def main(msg: func.QueueMessage) -> None:
    raw = msg.get_body().decode("utf-8", errors="replace")
    data = _safe_json_loads(raw)
    if not data:
        return
    row = to_row(data)
    if row is None:
        logger.error("skip malformed ledger message id=%s", data.get("id"))
        return
    blob_name = daily_blob_name()
    # une erreur de stockage remonte : le runtime rejoue puis met en poison queue
    append_row(_blob_client(), row, blob_name)
    logger.info("dumped post %s to %s/%s", row["postId"], ANALYTICS_CONT, blob_name)
