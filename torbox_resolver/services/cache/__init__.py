"""
Cache Package
"""
from torbox_resolver.services.cache.availability import availability_cache, AvailabilityCache

__all__ = ["availability_cache", "AvailabilityCache"]
