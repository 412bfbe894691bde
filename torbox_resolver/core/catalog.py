"""
Catalog
Lists the torrents already in a user's TorBox account as browsable items
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Any, Optional
from dateutil.parser import parse as parse_datetime

from torbox_resolver.core.helpers import is_video
from torbox_resolver.models.torrent import RemoteTorrent, encode_stream_url
from torbox_resolver.services.downloaders import torbox_service, TorboxService

KEY = "torbox"
TYPE_OTHER = "other"
DOWNLOADS_ID = "Downloads"
READY_STATES = ("finished", "ready")


def _released(added: Optional[str], offset_ms: int) -> str:
    base = None
    if added:
        try:
            base = parse_datetime(added)
        except (ValueError, OverflowError):
            base = None
    if base is None:
        base = datetime.now(timezone.utc)
    if base.tzinfo is None:
        base = base.replace(tzinfo=timezone.utc)
    
    released = (base - timedelta(milliseconds=offset_ms)).astimezone(timezone.utc)
    return released.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _videos(torrent: RemoteTorrent, api_key: str, prefix_title: bool = False) -> List[Dict[str, Any]]:
    videos = []
    for idx, file in enumerate(f for f in torrent.files if is_video(f.name)):
        file_id = file.id if file.id is not None else idx + 1
        videos.append({
            "id": f"{KEY}:{torrent.id}:{file_id}",
            "title": f"{torrent.name}/{file.name}" if prefix_title else file.name,
            "released": _released(torrent.added, idx),
            "streams": [{"url": encode_stream_url(api_key, torrent.hash, idx)}],
        })
    return videos


class TorboxCatalog:
    
    def __init__(self, service: Optional[TorboxService] = None):
        self.service = service or torbox_service
    
    async def get_catalog(self, api_key: str, offset: int = 0) -> List[Dict[str, Any]]:
        """Downloads folder followed by every ready torrent. Single page only."""
        if offset > 0:
            return []
        
        downloads_meta = {"id": f"{KEY}:{DOWNLOADS_ID}", "type": TYPE_OTHER, "name": DOWNLOADS_ID}
        torrents = await self.service.list_torrents(api_key)
        
        metas = [
            {"id": f"{KEY}:{t.id}", "type": TYPE_OTHER, "name": t.display_name}
            for t in torrents
            if t.status.lower() in READY_STATES or t.files
        ]
        return [downloads_meta, *metas]
    
    async def get_item_meta(self, item_id: str, api_key: str) -> Dict[str, Any]:
        if item_id == DOWNLOADS_ID:
            torrents = await self.service.list_torrents(api_key)
            videos = [v for t in torrents for v in _videos(t, api_key, prefix_title=True)]
            return {"id": f"{KEY}:{DOWNLOADS_ID}", "type": TYPE_OTHER, "name": DOWNLOADS_ID, "videos": videos}
        
        torrent = await self.service.get_torrent(api_key, item_id)
        if torrent is None:
            torrent = RemoteTorrent(id=item_id)
        
        return {
            "id": f"{KEY}:{torrent.id}",
            "type": TYPE_OTHER,
            "name": torrent.display_name,
            "infohash": torrent.hash,
            "videos": _videos(torrent, api_key),
        }


# Singleton instance
torbox_catalog = TorboxCatalog()
