"""
Static Responses
Relative paths of the placeholder videos played instead of a failed stream
"""
from enum import Enum


class StaticResponse(str, Enum):
    DOWNLOADING = "videos/downloading_v2.mp4"
    FAILED_DOWNLOAD = "videos/download_failed_v2.mp4"
    FAILED_ACCESS = "videos/failed_access_v2.mp4"
    FAILED_OPENING = "videos/failed_opening_v2.mp4"
    FAILED_UNEXPECTED = "videos/failed_unexpected_v2.mp4"
    LIMITS_EXCEEDED = "videos/limits_exceeded_v1.mp4"
    
    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{self.value}"
