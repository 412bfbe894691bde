"""
Availability Checker
Answers "is this torrent instantly playable on TorBox?" for many hashes at once
"""
import asyncio
from typing import Dict, Iterable, List, Optional, Sequence, Protocol
from loguru import logger

from torbox_resolver.config import settings
from torbox_resolver.core.helpers import chunk_list, mask_key
from torbox_resolver.models.torrent import AvailabilityEntry, encode_stream_url
from torbox_resolver.services.cache import availability_cache, AvailabilityCache
from torbox_resolver.services.downloaders import torbox_service, TorboxService


class StreamLike(Protocol):
    infohash: str
    file_index: Optional[int]


class AvailabilityChecker:
    """
    Cache-assisted bulk availability check.
    
    Hashes already in the local cache are answered from it. The rest are sent to
    TorBox in batches of ``batch_size``, one after another. Concurrent checks for
    the same API key share a semaphore sized by ``check_cached_concurrency``
    (1 by default), so at most that many batches per key hit the API at once;
    different keys do not wait on each other. A failing batch aborts the whole
    check, nothing partial is returned.
    """
    
    def __init__(
        self,
        service: Optional[TorboxService] = None,
        cache: Optional[AvailabilityCache] = None,
        batch_size: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        self.service = service or torbox_service
        self.cache = cache or availability_cache
        self.batch_size = batch_size or settings.check_cached_batch_size
        self.concurrency = concurrency or settings.check_cached_concurrency
        self._batch_gates: Dict[str, asyncio.Semaphore] = {}
    
    async def check_availability(self, info_hashes: Iterable[str], api_key: str) -> Dict[str, AvailabilityEntry]:
        """
        Returns dict mapping info_hash -> AvailabilityEntry for every requested hash.
        """
        hashes = list(dict.fromkeys(h.lower() for h in info_hashes if h))
        if not hashes:
            return {}
        
        known = await self.cache.get(hashes)
        missing = [h for h in hashes if h not in known]
        if not missing:
            logger.debug(f"Availability: all {len(hashes)} hashes answered from cache")
            return known
        
        batches = chunk_list(missing, self.batch_size)
        logger.debug(
            f"Availability: {len(known)} from cache, checking {len(missing)} on Torbox "
            f"in {len(batches)} batch(es) for {mask_key(api_key)}"
        )
        
        fetched: Dict[str, AvailabilityEntry] = {}
        for batch in batches:
            fetched.update(await self._check_batch(api_key, batch))
        
        stored = await self.cache.merge(fetched)
        
        cached_count = sum(1 for e in stored.values() if e.cached)
        logger.info(f"Torbox: {cached_count}/{len(missing)} newly checked torrents cached")
        
        return {**known, **stored}
    
    def _batch_gate(self, api_key: str) -> asyncio.Semaphore:
        gate = self._batch_gates.get(api_key)
        if gate is None:
            gate = self._batch_gates[api_key] = asyncio.Semaphore(self.concurrency)
        return gate
    
    async def _check_batch(self, api_key: str, batch: List[str]) -> Dict[str, AvailabilityEntry]:
        async with self._batch_gate(api_key):
            result = await self.service.check_cached(api_key, batch)
        
        by_hash = {str(k).lower(): v for k, v in result.items()}
        # Hashes TorBox left out are known-uncached from now on
        return {h: AvailabilityEntry.from_api(by_hash.get(h)) for h in batch}
    
    async def get_cached_streams(self, streams: Sequence[StreamLike], api_key: str) -> Dict[str, Dict]:
        """
        Cache status plus resolution URL for each stream.
        Returns dict mapping info_hash -> {"url": ..., "cached": bool}
        """
        available = await self.check_availability([s.infohash for s in streams], api_key)
        
        results: Dict[str, Dict] = {}
        for stream in streams:
            info_hash = stream.infohash.lower()
            entry = available.get(info_hash)
            results[info_hash] = {
                "url": encode_stream_url(api_key, info_hash, stream.file_index),
                "cached": bool(entry and entry.cached),
            }
        return results


# Singleton instance
availability_checker = AvailabilityChecker()
