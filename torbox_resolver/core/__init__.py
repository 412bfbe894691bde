"""
Core Package
"""
from torbox_resolver.core.availability import availability_checker, AvailabilityChecker
from torbox_resolver.core.resolver import torbox_resolver, TorboxResolver, ResolutionStage
from torbox_resolver.core.catalog import torbox_catalog, TorboxCatalog
from torbox_resolver.core.static import StaticResponse

__all__ = [
    "availability_checker",
    "AvailabilityChecker",
    "torbox_resolver",
    "TorboxResolver",
    "ResolutionStage",
    "torbox_catalog",
    "TorboxCatalog",
    "StaticResponse",
]
