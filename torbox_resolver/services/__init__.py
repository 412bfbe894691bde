"""
Services Package
"""
from torbox_resolver.services.downloaders import torbox_service
from torbox_resolver.services.cache import availability_cache

__all__ = [
    "torbox_service",
    "availability_cache",
]
