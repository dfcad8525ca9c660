from pydantic import BaseModel
from typing import Literal

MediaKind = Literal["image", "video", "unknown"]

class Location(BaseModel):
    lat: float = 0.0
    lon: float = 0.0

class Post(BaseModel):
    author: str
    message: str = ""
    location: Location = Location()
    mediaURL: str = ""
    mediaKind: MediaKind = "unknown"
    score: float = 0.0
