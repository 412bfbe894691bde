"""
Resolver
Turns a resolution token into a direct TorBox link

Stages:
START -> REGISTERED -> FILE_MAPPED -> LINK_OBTAINED -> DONE
"""
from enum import Enum
from typing import Optional, Union
from loguru import logger

from torbox_resolver.core.helpers import get_magnet_link, is_video, mask_key
from torbox_resolver.core.static import StaticResponse
from torbox_resolver.exceptions import FailureKind, NotFoundError, failure_kind
from torbox_resolver.models.torrent import RemoteId, ResolutionToken
from torbox_resolver.services.downloaders import torbox_service, TorboxService


class ResolutionStage(str, Enum):
    START = "start"
    REGISTERED = "registered"
    FILE_MAPPED = "file_mapped"
    LINK_OBTAINED = "link_obtained"
    DONE = "done"


class TorboxResolver:
    """
    Resolves one stream per call. Each stage is attempted exactly once;
    callers that want a retry call ``resolve`` again.
    """
    
    def __init__(self, service: Optional[TorboxService] = None):
        self.service = service or torbox_service
    
    async def ensure_registered(self, api_key: str, info_hash: str, magnet_link: str) -> RemoteId:
        """
        Make sure the torrent is in the account and return its TorBox ID.
        Safe to repeat: a duplicate answer from createtorrent falls back to the list.
        """
        torrent_id = await self.service.create_torrent(api_key, magnet_link)
        if torrent_id is not None:
            logger.info(f"Torbox: Added torrent {info_hash[:8]}... -> ID: {torrent_id}")
            return torrent_id
        
        info_hash = info_hash.lower()
        for torrent in await self.service.list_torrents(api_key):
            if torrent.hash == info_hash:
                logger.debug(f"Torbox: {info_hash[:8]}... already in account as {torrent.id}")
                return torrent.id
        
        raise NotFoundError("Torrent not found/created")
    
    async def map_index(self, api_key: str, torrent_id: RemoteId, index: int) -> RemoteId:
        """
        Map the n-th video file (TorBox listing order) to its TorBox file ID.
        """
        torrent = await self.service.get_torrent(api_key, torrent_id)
        videos = [f for f in torrent.files if is_video(f.name)] if torrent else []
        
        if index < 0 or index >= len(videos):
            raise NotFoundError("File index out of range")
        
        file = videos[index]
        if file.id is not None:
            return file.id
        # Some plans omit per-file ids; TorBox then numbers files from 1
        return index + 1
    
    async def request_link(
        self,
        api_key: str,
        torrent_id: RemoteId,
        file_id: RemoteId,
        client_ip: Optional[str] = None,
    ) -> str:
        return await self.service.request_download_link(api_key, torrent_id, file_id, client_ip)
    
    async def resolve(self, token: ResolutionToken) -> Union[str, StaticResponse]:
        """
        Resolve a token to a playable URL, or to the static response to play instead.
        """
        stage = ResolutionStage.START
        try:
            magnet = get_magnet_link(token.infohash)
            torrent_id = await self.ensure_registered(token.api_key, token.infohash, magnet)
            stage = ResolutionStage.REGISTERED
            
            file_id = await self.map_index(token.api_key, torrent_id, token.file_index)
            stage = ResolutionStage.FILE_MAPPED
            
            url = await self.request_link(token.api_key, torrent_id, file_id, token.ip)
            stage = ResolutionStage.LINK_OBTAINED
        except Exception as e:
            return self._failure_response(token, stage, e)
        
        stage = ResolutionStage.DONE
        logger.info(f"Resolved {token.infohash[:8]}... [{token.file_index}] for {mask_key(token.api_key)} ({stage.value})")
        return url
    
    @staticmethod
    def _failure_response(token: ResolutionToken, stage: ResolutionStage, error: Exception) -> StaticResponse:
        kind = failure_kind(error)
        context = f"{token.infohash[:8]}... [{token.file_index}] after {stage.value}"
        
        if kind in (FailureKind.BAD_TOKEN, FailureKind.ACCESS_DENIED):
            logger.warning(f"Torbox access failed for {context}: {kind.value}")
            return StaticResponse.FAILED_ACCESS
        if kind == FailureKind.NOT_FOUND:
            logger.warning(f"Torbox lookup failed for {context}: {error}")
            return StaticResponse.FAILED_UNEXPECTED
        
        logger.error(f"Torbox resolve failed for {context}: {error!r}")
        return StaticResponse.FAILED_UNEXPECTED


# Singleton instance
torbox_resolver = TorboxResolver()
