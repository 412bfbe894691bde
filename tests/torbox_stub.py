"""
In-process stand-in for the TorBox API, built on httpx.MockTransport
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx

from torbox_resolver.models.torrent import AvailabilityEntry
from torbox_resolver.services.downloaders.torbox import TorboxService

API_URL = "https://api.torbox.app/v1/api"
API_PATH = "/v1/api"

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


def ok(data: Any) -> Tuple[int, Any]:
    return 200, {"success": True, "detail": "", "data": data}


def error(status: int, detail: str = "error") -> Tuple[int, Any]:
    return status, {"success": False, "detail": detail, "data": None}


class TorboxStub:
    """
    Routes requests by (method, endpoint) to queued replies.
    The last reply of a route repeats once the queue is drained.
    """
    
    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
    
    def on(self, method: str, endpoint: str, *replies: Reply) -> "TorboxStub":
        self.routes[(method, API_PATH + endpoint)] = list(replies)
        return self
    
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"success": False, "detail": "no route"})
        
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(reply):
            return reply(request)
        status, body = reply
        return httpx.Response(status, json=body)
    
    def calls(self, method: str, endpoint: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == API_PATH + endpoint]
    
    def service(self) -> TorboxService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return TorboxService(client=client, base_url=API_URL)


class MemoryCache:
    """Dict-backed availability store with the same get/merge contract"""
    
    def __init__(self, entries: Optional[Dict[str, AvailabilityEntry]] = None):
        self.entries: Dict[str, AvailabilityEntry] = dict(entries or {})
        self.merges: List[Dict[str, AvailabilityEntry]] = []
    
    async def get(self, info_hashes):
        return {h: self.entries[h] for h in info_hashes if h in self.entries}
    
    async def merge(self, entries):
        self.merges.append(dict(entries))
        for info_hash, entry in entries.items():
            current = self.entries.get(info_hash)
            if current is not None and current.cached and not entry.cached:
                continue
            self.entries[info_hash] = entry
        return {h: self.entries[h] for h in entries}
