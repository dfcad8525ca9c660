# geopost/services/media_service.py
import logging
import mimetypes
from typing import Optional

import requests

from ..errors import AnalysisFailed

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    ".jpeg": "image",
    ".jpg": "image",
    ".gif": "image",
    ".png": "image",
    ".mov": "video",
    ".mp4": "video",
    ".avi": "video",
    ".flv": "video",
    ".wmv": "video",
}

# Le service d'analyse ne sait traiter que le jpeg.
SCORED_EXTENSION = ".jpeg"


def extension(filename: str) -> str:
    """Suffix from the last '.' of the base name, case preserved ('' if none)."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    idx = name.rfind(".")
    return name[idx:] if idx >= 0 else ""


def classify(filename: str) -> str:
    return MEDIA_TYPES.get(extension(filename), "unknown")


def needs_score(filename: str) -> bool:
    return extension(filename) == SCORED_EXTENSION


class ImageScorer:
    """
    HTTP client for the image-analysis service.
    POST multipart `file`, expects a JSON reply like {"score": 0.97}.
    """

    def __init__(self, url: Optional[str], timeout: float = 20.0):
        self.url = (url or "").strip()
        self.timeout = timeout

    def score(self, data: bytes, filename: str = "image.jpeg") -> float:
        if not self.url:
            raise AnalysisFailed("Failed to annotate the image: analysis service not configured")
        mime = mimetypes.guess_type(filename)[0] or "image/jpeg"
        try:
            r = requests.post(
                self.url,
                files={"file": (filename, data, mime)},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            logger.error("analysis POST %s failed: %s", self.url, e)
            raise AnalysisFailed() from e
        try:
            payload = r.json()
            return float(payload["score"])
        except (ValueError, TypeError, KeyError) as e:
            logger.error("analysis reply unusable: %r", (r.text or "")[:200])
            raise AnalysisFailed() from e
