"""
Torbox Downloader Service
Thin async client for the four TorBox endpoints used during resolution
"""
import httpx
from typing import Optional, List, Dict, Any, Sequence, Tuple
from loguru import logger

from torbox_resolver.config import settings
from torbox_resolver.exceptions import NotFoundError, rethrow_auth
from torbox_resolver.models.torrent import RemoteId, RemoteTorrent


class TorboxService:
    """Service for interacting with Torbox API on behalf of a user's API key"""
    
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        read_timeout: Optional[float] = None,
        create_timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.torbox_api_url).rstrip("/")
        self.read_timeout = read_timeout or settings.read_timeout
        self.create_timeout = create_timeout or settings.create_timeout
        self.client = client or httpx.AsyncClient()
    
    @staticmethod
    def headers(api_key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}
    
    async def _request(
        self,
        method: str,
        endpoint: str,
        api_key: Optional[str] = None,
        params: Any = None,
        json_data: Optional[Dict] = None,
        timeout: Optional[float] = None,
        tolerated_statuses: Tuple[int, ...] = (),
    ) -> Any:
        """
        Make request to Torbox API and return the ``data`` member of the envelope.
        
        When ``api_key`` is given it is sent as a bearer header. Statuses listed in
        ``tolerated_statuses`` yield None instead of an error; any other failing
        status goes through the auth classifier.
        """
        url = f"{self.base_url}{endpoint}"
        headers = self.headers(api_key) if api_key else {}
        
        logger.debug(f"Torbox: {method} {endpoint}")
        response = await self.client.request(
            method,
            url,
            headers=headers,
            params=params,
            json=json_data,
            timeout=timeout or self.read_timeout,
        )
        
        if response.status_code in tolerated_statuses:
            logger.warning(f"Torbox: {endpoint} answered {response.status_code}, treating as already satisfied")
            return None
        
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.debug(f"Torbox API error: {e.response.status_code} - {e.response.text[:200]}")
            rethrow_auth(e)
        
        result = response.json()
        return result.get("data") if isinstance(result, dict) else None
    
    async def check_cached(self, api_key: str, info_hashes: Sequence[str]) -> Dict[str, Any]:
        """
        Bulk cache check for one batch of hashes.
        Returns TorBox's object-format answer: hash -> {name, size, files}.
        Hashes TorBox does not know are simply absent.
        """
        params: List[Tuple[str, str]] = [("hash", h) for h in info_hashes]
        params += [("format", "object"), ("list_files", "true")]
        
        result = await self._request("GET", "/torrents/checkcached", api_key=api_key, params=params)
        return result if isinstance(result, dict) else {}
    
    async def create_torrent(self, api_key: str, magnet_link: str) -> Optional[RemoteId]:
        """
        Add a magnet link to the account.
        Returns the new torrent ID, or None when TorBox reports a duplicate (400/409)
        or answers without an ID.
        """
        result = await self._request(
            "POST",
            "/torrents/createtorrent",
            api_key=api_key,
            json_data={"magnet_link": magnet_link},
            timeout=self.create_timeout,
            tolerated_statuses=(400, 409),
        )
        
        if isinstance(result, dict):
            torrent_id = result.get("id", result.get("torrent_id"))
            if torrent_id is not None:
                return torrent_id
        return None
    
    async def list_torrents(self, api_key: str) -> List[RemoteTorrent]:
        """Get list of user's torrents"""
        result = await self._request("GET", "/torrents/mylist", api_key=api_key)
        if not isinstance(result, list):
            return []
        return [RemoteTorrent.from_api(t) for t in result if isinstance(t, dict)]
    
    async def get_torrent(self, api_key: str, torrent_id: RemoteId) -> Optional[RemoteTorrent]:
        """Get a single torrent including its files"""
        result = await self._request("GET", "/torrents/mylist", api_key=api_key, params={"id": torrent_id})
        
        # Depending on the account TorBox wraps the single record in a list
        if isinstance(result, list):
            result = result[0] if result else None
        if not isinstance(result, dict):
            return None
        return RemoteTorrent.from_api(result)
    
    async def request_download_link(
        self,
        api_key: str,
        torrent_id: RemoteId,
        file_id: RemoteId,
        user_ip: Optional[str] = None,
    ) -> str:
        """
        Ask TorBox for a direct link to one file.
        This endpoint authenticates with a ``token`` query parameter, not a bearer header.
        """
        params = {
            "token": api_key,
            "torrent_id": torrent_id,
            "file_id": file_id,
            "redirect": "false",
        }
        if user_ip:
            params["user_ip"] = user_ip
        
        result = await self._request("GET", "/torrents/requestdl", params=params)
        
        if isinstance(result, str) and result:
            return result
        if isinstance(result, dict):
            link = result.get("download") or result.get("url")
            if link:
                return link
        raise NotFoundError("No download link")
    
    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()


# Singleton instance
torbox_service = TorboxService()
