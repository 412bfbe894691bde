"""
Routers Package
"""
from torbox_resolver.routers import health, torbox

__all__ = ["health", "torbox"]
