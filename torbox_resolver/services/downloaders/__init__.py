"""
Downloaders Package
"""
from torbox_resolver.services.downloaders.torbox import torbox_service, TorboxService

__all__ = [
    "torbox_service",
    "TorboxService",
]
