"""
TorBox Router
Availability, resolution and catalog endpoints for the add-on
"""
from typing import Optional, List, Dict, Any, NoReturn
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from loguru import logger

from torbox_resolver.config import settings
from torbox_resolver.core.availability import availability_checker
from torbox_resolver.core.catalog import torbox_catalog
from torbox_resolver.core.resolver import torbox_resolver
from torbox_resolver.core.static import StaticResponse
from torbox_resolver.exceptions import AccessDeniedError, BadTokenError
from torbox_resolver.models.torrent import ResolutionToken

router = APIRouter(prefix="/torbox")


class StreamItem(BaseModel):
    infohash: str = Field(..., pattern="^[0-9a-fA-F]{40}$")
    file_index: Optional[int] = Field(default=None, ge=0)


class AvailabilityRequest(BaseModel):
    api_key: str = Field(..., min_length=1)
    streams: List[StreamItem]


class CachedStream(BaseModel):
    url: str
    cached: bool


def _raise_http(e: Exception) -> NoReturn:
    """Translate a failed TorBox read into an HTTP error"""
    if isinstance(e, BadTokenError):
        raise HTTPException(status_code=401, detail="Invalid TorBox API key")
    if isinstance(e, AccessDeniedError):
        raise HTTPException(status_code=402, detail="TorBox plan does not allow this")
    logger.error(f"Torbox request failed: {e!r}")
    raise HTTPException(status_code=502, detail="Upstream service error")


@router.post("/availability")
async def check_availability(body: AvailabilityRequest) -> Dict[str, CachedStream]:
    """
    Cache status for a list of streams.
    A failure here means availability is unknown, not that nothing is cached.
    """
    try:
        return await availability_checker.get_cached_streams(body.streams, body.api_key)
    except Exception as e:
        _raise_http(e)


@router.get("/resolve/{api_key}/{infohash}/{cached_entry_info}/{file_index}")
async def resolve_stream(
    api_key: str,
    infohash: str,
    cached_entry_info: str,
    file_index: str,
    request: Request,
) -> RedirectResponse:
    """Redirect to a direct TorBox link, or to the matching failure video"""
    client_ip = request.client.host if request.client else None
    token = ResolutionToken.from_path(api_key, infohash, file_index, ip=client_ip)
    
    result = await torbox_resolver.resolve(token)
    if isinstance(result, StaticResponse):
        return RedirectResponse(result.url(settings.static_base_url), status_code=302)
    return RedirectResponse(result, status_code=302)


@router.get("/catalog/{api_key}")
async def get_catalog(api_key: str, offset: int = Query(0, ge=0)) -> List[Dict[str, Any]]:
    try:
        return await torbox_catalog.get_catalog(api_key, offset)
    except Exception as e:
        _raise_http(e)


@router.get("/meta/{api_key}/{item_id}")
async def get_item_meta(api_key: str, item_id: str) -> Dict[str, Any]:
    try:
        return await torbox_catalog.get_item_meta(item_id, api_key)
    except Exception as e:
        _raise_http(e)
