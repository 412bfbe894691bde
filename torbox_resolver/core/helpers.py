"""
Small helpers shared by the availability checker, resolver and catalog
"""
from typing import List, Sequence, TypeVar

T = TypeVar("T")

VIDEO_EXTENSIONS = (
    ".3g2", ".3gp", ".avi", ".flv", ".mkv", ".mk3d", ".mov", ".mp2", ".mp4",
    ".m4v", ".mpe", ".mpeg", ".mpg", ".mpv", ".webm", ".wmv", ".ogm", ".divx",
    ".ts", ".m2ts", ".vob",
)


def get_magnet_link(infohash: str) -> str:
    return f"magnet:?xt=urn:btih:{infohash}"


def is_video(filename: str) -> bool:
    """True if the file name ends with a known video extension"""
    return bool(filename) and filename.lower().endswith(VIDEO_EXTENSIONS)


def chunk_list(items: Sequence[T], size: int) -> List[List[T]]:
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def mask_key(api_key: str) -> str:
    """Shorten an API key for log output"""
    if not api_key:
        return "<none>"
    return f"{api_key[:4]}..."
